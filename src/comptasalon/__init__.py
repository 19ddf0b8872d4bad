"""ComptaSalon - Reconciliation financiere pour salons de coiffure."""

__version__ = "0.1.0"
