"""Hivewatch error hierarchy."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCategory(StrEnum):
    """Category of error for classification and handling."""

    DISCOVERY = "discovery"
    CONFIGURATION = "configuration"
    EVENT = "event"
    INTERNAL = "internal"


class HivewatchError(Exception):
    """Base error for all hivewatch exceptions."""

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory = ErrorCategory.INTERNAL,
        retryable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.retryable = retryable
        self.details: dict[str, Any] = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r}, category={self.category!r})"


class DiscoveryError(HivewatchError):
    """An external process listing could not be obtained.

    Raised by process sources (missing binary, non-zero exit, timeout) and
    always recovered inside the discovery pass.
    """

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        retryable: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, category=ErrorCategory.DISCOVERY, retryable=retryable, **kwargs)
        self.command = command


class ConfigurationError(HivewatchError):
    """Invalid or unreadable configuration."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message, category=ErrorCategory.CONFIGURATION, retryable=False)
        self.key = key


class EventFormatError(HivewatchError):
    """A hook event is missing a required field."""

    def __init__(self, message: str, *, field_name: str | None = None) -> None:
        super().__init__(message, category=ErrorCategory.EVENT, retryable=False)
        self.field_name = field_name
