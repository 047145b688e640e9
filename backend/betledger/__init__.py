"""Betledger: in-memory wager ledger with concurrent bet placement and settlement."""

__version__ = "0.1.0"
__author__ = "Betledger Team"

__all__ = ["__version__", "__author__"]
