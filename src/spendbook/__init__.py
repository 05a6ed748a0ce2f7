"""spendbook: consolidate bank statement exports into one categorized ledger."""

__version__ = "0.1.0"
