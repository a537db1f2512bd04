from .base import (
    AlreadyExistsError,
    AppError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AlreadyExistsError",
    "AppError",
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "ServiceError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
