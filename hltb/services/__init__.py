"""Service layer for page parsing and external integrations."""

from .config import ConfigurationService, ValidationResult
from .durations import parse_time
from .errors import (
    AppError,
    ConfigurationError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    MalformedFieldError,
    NetworkError,
    StructuralMismatchError,
    UserFriendlyError,
    ValidationError,
    get_error_service,
    handle_error,
)
from .game_parser import GameParser, TimeCategory, classify_label
from .game_scraper import GameScraperService
from .http_client import HttpClientService
from .similarity import calc_similarity

__all__ = [
    "AppError",
    "ConfigurationError",
    "ConfigurationService",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "GameParser",
    "GameScraperService",
    "HttpClientService",
    "MalformedFieldError",
    "NetworkError",
    "StructuralMismatchError",
    "TimeCategory",
    "UserFriendlyError",
    "ValidationError",
    "ValidationResult",
    "calc_similarity",
    "classify_label",
    "get_error_service",
    "handle_error",
    "parse_time",
]
