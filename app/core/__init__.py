"""Core 모듈"""

from app.core.config import settings
from app.core.database import Base
from app.core.exceptions import (
    BadRequestException,
    BaseAPIException,
    ErrorCode,
    InternalServerException,
    NotFoundException,
    StorageException,
    UnauthorizedException,
    UpstreamUnavailableException,
)
from app.core.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "Base",
    "ErrorCode",
    "BaseAPIException",
    "BadRequestException",
    "UnauthorizedException",
    "NotFoundException",
    "InternalServerException",
    "UpstreamUnavailableException",
    "StorageException",
    "get_logger",
    "setup_logging",
]
