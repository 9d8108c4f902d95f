"""Point-of-sale order ledger for a single food stand."""
