from .common import ClientErrorResponse, ErrorResponse, HealthStatus
from .compress import CompressionResult

__all__ = [
    "ClientErrorResponse",
    "CompressionResult",
    "ErrorResponse",
    "HealthStatus",
]
