"""Travel-companion matching client: candidate reconciliation and display prep."""

__version__ = "0.3.0"
