"""Domain models"""
from tokengate.models.ledger_entry import CurrentPointer, LedgerEntry, LedgerSnapshot
from tokengate.models.principal import IssuedToken, Principal

__all__ = ["CurrentPointer", "IssuedToken", "LedgerEntry", "LedgerSnapshot", "Principal"]
