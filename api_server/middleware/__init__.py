"""HTTP middleware: CORS, rate limiting and request logging"""

from .cors import setup_cors, parse_origins
from .rate_limit import setup_rate_limit, limiter, get_rate_limit_string
from .logging import setup_logging, LoggingMiddleware

__all__ = [
    "setup_cors",
    "parse_origins",
    "setup_rate_limit",
    "limiter",
    "get_rate_limit_string",
    "setup_logging",
    "LoggingMiddleware",
]
