"""Session ledger backends"""
from tokengate.ledger.base import SessionLedger
from tokengate.ledger.memory import InMemorySessionLedger
from tokengate.ledger.redis_ledger import RedisSessionLedger

__all__ = ["InMemorySessionLedger", "RedisSessionLedger", "SessionLedger"]
