from .base import (
    AppError,
    DomainError,
    ErrorKind,
    InfrastructureError,
    InvalidInputError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "ErrorKind",
    "InfrastructureError",
    "InvalidInputError",
    "StoreUnavailableError",
    "UnauthenticatedError",
    "handle_app_error",
    "register_error_handler",
]
