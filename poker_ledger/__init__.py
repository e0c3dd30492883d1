"""Game ledger reconciliation and settlement netting for a poker group."""

__version__ = "0.1.0"
