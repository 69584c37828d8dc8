# Utils module
from .observability import Logger, initialize_observability, CORRELATION_ID

__all__ = [
    "Logger",
    "initialize_observability",
    "CORRELATION_ID",
]
