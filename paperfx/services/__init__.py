"""Business logic: ledger, position lifecycle, robot config and accounts."""
