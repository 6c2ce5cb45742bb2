"""Processing layer: earnings reconciliation and ticker-universe maintenance."""
