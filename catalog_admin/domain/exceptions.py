"""Domain exceptions.

All catalog-level errors raised by services and stores. Each error
carries an HTTP status code so the API layer can map it to a response
without inspecting the error type.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog exceptions.

    Attributes:
        message: Human-readable error message.
        details: Optional diagnostic string or mapping.
        status_code: HTTP status the error maps to.
    """

    status_code: int = 500

    def __init__(self, message: str, details: Any = None) -> None:
        """Initialize catalog error.

        Args:
            message: Human-readable error message.
            details: Optional diagnostic context.
        """
        super().__init__(message)
        self.message = message
        self.details = details


# ============================================================================
# Client Errors
# ============================================================================


class ValidationError(CatalogError):
    """Raised when required input is missing or malformed."""

    status_code = 400


class InvalidIdentifier(CatalogError):
    """Raised when a record identifier is not well-formed."""

    status_code = 400

    def __init__(self, entity_type: str, value: Any) -> None:
        """Initialize invalid identifier error.

        Args:
            entity_type: Kind of record the identifier refers to.
            value: The rejected identifier.
        """
        super().__init__(
            f"Invalid {entity_type} ID format",
            details={"entity_type": entity_type, "value": str(value)},
        )
        self.entity_type = entity_type
        self.value = value


class NotFoundError(CatalogError):
    """Raised when no record exists for an identifier."""

    status_code = 404

    def __init__(self, entity_type: str, entity_id: str | None = None) -> None:
        """Initialize not found error.

        Args:
            entity_type: Kind of record (e.g., "Product", "Subcategory").
            entity_id: Identifier that was looked up.
        """
        super().__init__(
            f"{entity_type} not found",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConflictError(CatalogError):
    """Raised when a write would duplicate an existing record."""

    status_code = 409


class AuthenticationError(CatalogError):
    """Raised when credentials or tokens are rejected."""

    status_code = 401


# ============================================================================
# Server Errors
# ============================================================================


class UpstreamError(CatalogError):
    """Raised when the media host fails a request."""

    status_code = 500


class InternalError(CatalogError):
    """Raised when the store fails unexpectedly."""

    status_code = 500
