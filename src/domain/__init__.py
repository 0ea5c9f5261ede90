"""Domain layer: errors, constants and schemas."""

from .errors import BindError, ConfigurationError, ErrorCodes, ReceiverError
from .schemas import (
    ReceiverConfig,
    ReceiverState,
    UploadResult,
)

__all__ = [
    "ReceiverError",
    "ConfigurationError",
    "BindError",
    "ErrorCodes",
    "ReceiverConfig",
    "ReceiverState",
    "UploadResult",
]
