"""Ledger gateway errors."""

from __future__ import annotations


class LedgerAPIError(RuntimeError):
    """Raised when a gateway or bundler returns an error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, service: str, status_code: int) -> LedgerAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"{service} HTTP {status_code}", status_code=status_code)

    @classmethod
    def graphql_errors(cls, errors: object) -> LedgerAPIError:
        """Return an error for GraphQL `errors` payloads."""
        return cls(f"Arweave GraphQL errors: {errors}")


class LedgerResponseShapeError(RuntimeError):
    """Raised when a gateway response is missing expected fields."""

    @classmethod
    def missing(cls, field: str) -> LedgerResponseShapeError:
        """Return an error for a missing response field."""
        return cls(f"Ledger response missing expected field: {field}")


class LedgerConfigError(RuntimeError):
    """Raised when ledger client configuration is invalid."""

    @classmethod
    def empty_url(cls, name: str) -> LedgerConfigError:
        """Return an error when a service URL is blank."""
        return cls(f"{name} must be a non-empty URL")
