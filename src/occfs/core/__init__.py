"""Transaction core: manager, transactions, settings and errors."""
