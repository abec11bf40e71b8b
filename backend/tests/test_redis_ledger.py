"""Tests for the Redis-backed session ledger"""
from unittest.mock import MagicMock

import pytest
from redis import ConnectionError as RedisConnectionError

from tokengate.errors import LedgerUnavailableError
from tokengate.ledger import RedisSessionLedger


@pytest.fixture
def redis_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def redis_ledger(redis_client: MagicMock) -> RedisSessionLedger:
    return RedisSessionLedger(redis_client)


def test_activate_writes_both_keys_in_one_transaction(redis_ledger, redis_client):
    pipe = redis_client.pipeline.return_value

    redis_ledger.activate("jti-1", "admin", 28800)

    redis_client.pipeline.assert_called_once_with(transaction=True)
    pipe.hset.assert_called_once_with("tokengate:entry:jti-1", "active", "1")
    pipe.expire.assert_called_once_with("tokengate:entry:jti-1", 28800)
    pipe.set.assert_called_once_with("tokengate:current:admin", "jti-1", ex=28800)
    pipe.execute.assert_called_once()


def test_revoke_sets_revoked_and_clears_active(redis_ledger, redis_client):
    pipe = redis_client.pipeline.return_value

    redis_ledger.revoke("jti-1", 120.2)

    assert pipe.hsetnx.call_args.args[:2] == ("tokengate:entry:jti-1", "revoked_at")
    pipe.hdel.assert_called_once_with("tokengate:entry:jti-1", "active")
    pipe.expire.assert_called_once_with("tokengate:entry:jti-1", 121)


def test_ttl_is_at_least_one_second(redis_ledger, redis_client):
    pipe = redis_client.pipeline.return_value
    redis_ledger.revoke("jti-1", 0.01)
    pipe.expire.assert_called_once_with("tokengate:entry:jti-1", 1)


def test_snapshot_reads_entry_and_pointer(redis_ledger, redis_client):
    redis_client.pipeline.return_value.execute.return_value = [{"active": "1"}, "jti-1"]

    snapshot = redis_ledger.snapshot("jti-1", "admin")

    assert snapshot.active is True
    assert snapshot.revoked is False
    assert snapshot.is_current("jti-1")


def test_snapshot_of_revoked_entry(redis_ledger, redis_client):
    redis_client.pipeline.return_value.execute.return_value = [
        {"active": "1", "revoked_at": "1700000000.0"},
        "jti-1",
    ]

    snapshot = redis_ledger.snapshot("jti-1", "admin")

    assert snapshot.revoked is True
    assert snapshot.active is False


def test_snapshot_of_missing_keys(redis_ledger, redis_client):
    redis_client.pipeline.return_value.execute.return_value = [{}, None]

    snapshot = redis_ledger.snapshot("jti-1", "admin")

    assert (snapshot.revoked, snapshot.active, snapshot.current_jti) == (False, False, None)


def test_single_reads(redis_ledger, redis_client):
    redis_client.hexists.return_value = 1
    redis_client.hgetall.return_value = {"active": "1"}
    redis_client.get.return_value = "jti-9"

    assert redis_ledger.is_revoked("jti-1") is True
    assert redis_ledger.is_active("jti-1") is True
    assert redis_ledger.current_token_for("admin") == "jti-9"
    redis_client.get.assert_called_once_with("tokengate:current:admin")


def test_redis_errors_become_ledger_unavailable(redis_ledger, redis_client):
    redis_client.pipeline.return_value.execute.side_effect = RedisConnectionError("refused")
    redis_client.ping.side_effect = RedisConnectionError("refused")

    with pytest.raises(LedgerUnavailableError) as exc_info:
        redis_ledger.activate("jti-1", "admin", 60)
    assert exc_info.value.operation == "activate"

    with pytest.raises(LedgerUnavailableError):
        redis_ledger.snapshot("jti-1", "admin")

    with pytest.raises(LedgerUnavailableError):
        redis_ledger.ping()


def test_custom_key_prefix(redis_client):
    ledger = RedisSessionLedger(redis_client, key_prefix="staging")
    ledger.current_token_for("admin")
    redis_client.get.assert_called_once_with("staging:current:admin")
