"""Python client for the TokenGate API"""
from tokengate_client.client import TokenGateClient, TokenGateError

__all__ = ["TokenGateClient", "TokenGateError"]
