"""Domain exceptions."""
from typing import Any, Dict, List, Optional


class DomainException(Exception):
    """Base exception for domain layer errors."""
    pass


class RepositoryError(DomainException):
    """Exception raised when repository operations fail."""

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.cause = cause


class EntityNotFoundError(RepositoryError):
    """Exception raised when an entity is not found in the repository."""

    def __init__(self, entity_type: str, entity_id: Any, *, message: str | None = None):
        final_message = message or f"{entity_type} not found: {entity_id}"
        super().__init__(final_message)
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateEntityError(RepositoryError):
    """Exception raised when a unique constraint would be violated."""

    def __init__(self, entity_type: str, key: str, *, message: str | None = None):
        final_message = message or f"{entity_type} already exists: {key}"
        super().__init__(final_message)
        self.entity_type = entity_type
        self.key = key


class EntityValidationError(DomainException):
    """Exception raised when entity validation fails."""

    def __init__(self, entity_type: str, errors: dict):
        message = f"Validation failed for {entity_type}: {errors}"
        super().__init__(message)
        self.entity_type = entity_type
        self.errors = errors


class DomainValidationError(DomainException):
    """Exception raised when validation fails at the domain boundary."""

    def __init__(self, message: str, *, details: Optional[List[str]] = None):
        super().__init__(message)
        self.details = details or []


class AuthenticationError(DomainException):
    """Raised when a user cannot be signed in."""


class ExternalServiceError(DomainException):
    """Raised when a third-party API call fails."""

    def __init__(self, service: str, message: str, *, status_code: Optional[int] = None):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status_code = status_code


class StorageSizeLimitError(ExternalServiceError):
    """Raised when blob storage rejects an upload because of its size."""


class OcrPipelineError(DomainException):
    """Raised when the OCR pipeline cannot complete; carries compression events."""

    def __init__(self, message: str, *, compression_events: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.compression_events = list(compression_events or [])
