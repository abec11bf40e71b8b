"""Middleware modules for production-ready features"""
from tokengate.middleware.app_check import AppCheckMiddleware
from tokengate.middleware.monitoring import MonitoringMiddleware
from tokengate.middleware.rate_limit import get_rate_limit, limiter

__all__ = [
    "AppCheckMiddleware",
    "MonitoringMiddleware",
    "limiter",
    "get_rate_limit",
]
