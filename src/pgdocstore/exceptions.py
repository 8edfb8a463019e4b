"""Custom exceptions for pgdocstore.

This module defines all custom exceptions used throughout the library for
consistent error handling and clear error messaging.

Errors raised by the PostgreSQL driver (duplicate ids, unique index
violations, connection drops during a statement) are never wrapped: they
propagate unchanged so callers can tell a data conflict apart from a
programming mistake in filter/order/index construction.
"""

from typing import Any, Dict


# Base exception
class DocStoreError(Exception):
    """Base exception for all pgdocstore errors.

    Attributes:
        message: Error message
        details: Additional error context as key-value pairs
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        """Initialize exception with message and additional details.

        Args:
            message: Human-readable error message
            **kwargs: Additional context (e.g., collection_name, field, filter_type)
        """
        self.message = message
        self.details: Dict[str, Any] = kwargs
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the complete error message with details."""
        if not self.details:
            return self.message

        details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        if self.message:
            return f"{self.message} ({details_str})"
        return details_str

    def __repr__(self) -> str:
        """Return detailed representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# Configuration exceptions
class ConfigurationError(DocStoreError):
    """Raised when a filter, projection or index is composed in an invalid way.

    Example:
        >>> raise ConfigurationError("AnyFilter cannot be used together with other filters")
    """


class InvalidArgumentError(ConfigurationError):
    """Raised when an argument passed to the store or a declaration is invalid.

    Example:
        >>> raise InvalidArgumentError("Missing key in index data", key="field")
    """


class MissingConfigError(ConfigurationError):
    """Raised when required configuration values are not set.

    Example:
        >>> raise MissingConfigError("Configuration not set", config_key="PG_DBNAME")
    """


# Unsupported construct exceptions
class UnsupportedConstructError(DocStoreError):
    """Raised when a compiler receives a node type it does not know."""


class UnsupportedFilterError(UnsupportedConstructError):
    """Raised for filter types the filter compiler cannot translate.

    Example:
        >>> raise UnsupportedFilterError("Unsupported filter type", filter_type="RegexFilter")
    """


class UnsupportedOrderByError(UnsupportedConstructError):
    """Raised for order-by types the order compiler cannot translate."""


class UnsupportedIndexError(UnsupportedConstructError):
    """Raised for index declarations the index compiler cannot translate."""


# Validation exceptions
class ValidationError(DocStoreError):
    """Raised when document validation fails.

    Example:
        >>> raise ValidationError("Invalid document format", expected_type="dict")
    """


class InvalidFieldError(ValidationError):
    """Raised when a field has an invalid value or type.

    Example:
        >>> raise InvalidFieldError("Invalid metadata column name", field="my-col")
    """


# Connection exceptions
class ConnectionError(DocStoreError):
    """Raised when the database connection cannot be established.

    Example:
        >>> raise ConnectionError("Database not connected", host="localhost", port="5432")
    """
