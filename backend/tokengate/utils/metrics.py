"""Token lifecycle counters"""
from prometheus_client import Counter

logins_total = Counter(
    "tokengate_logins_total",
    "Total login attempts",
    ["result"]  # success, failure
)

logouts_total = Counter(
    "tokengate_logouts_total",
    "Total token revocations via logout"
)

token_validations_total = Counter(
    "tokengate_token_validations_total",
    "Total token validation decisions",
    ["outcome"]  # valid, bad_signature, expired, bad_claims, revoked, inactive, superseded, unavailable
)


def record_login(success: bool):
    """Record login attempt metric"""
    logins_total.labels(result="success" if success else "failure").inc()


def record_logout():
    """Record logout metric"""
    logouts_total.inc()


def record_validation(outcome: str):
    """Record token validation outcome"""
    token_validations_total.labels(outcome=outcome).inc()
