"""
Error types and the Result value returned by the Notion client
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class NotionSitemapError(Exception):
    """Base class for all errors raised or reported by notion_sitemap."""


class ApiError(NotionSitemapError):
    """The Notion API rejected a request or answered with an error payload."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def __str__(self) -> str:
        details = ", ".join(
            part
            for part in (
                f"status={self.status}" if self.status is not None else "",
                f"code={self.code}" if self.code else "",
            )
            if part
        )
        return f"{self.message} ({details})" if details else self.message


class UnknownError(NotionSitemapError):
    """Any other failure: network trouble, bad JSON, unexpected payloads."""


class ConfigurationError(NotionSitemapError):
    """Required configuration is missing or invalid."""


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a client operation.

    Exactly one of ``value`` and ``error`` is meaningful: a successful result
    has ``error`` set to None, a failed one carries an ``ApiError`` or
    ``UnknownError``.
    """

    value: Optional[T] = None
    error: Optional[NotionSitemapError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: NotionSitemapError) -> "Result[Any]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        """Return the payload, or ``default`` when the operation failed."""
        return self.value if self.ok else default
