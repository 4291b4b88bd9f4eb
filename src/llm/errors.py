"""Typed errors raised by LLM provider clients."""

from enum import Enum


class UpstreamErrorKind(str, Enum):
    """Category of an upstream model failure."""

    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_CREDENTIALS = "invalid_credentials"
    TRANSIENT = "transient"
    OTHER = "other"


class UpstreamModelError(Exception):
    """Exception raised when an upstream model API call fails."""

    def __init__(
        self,
        message: str,
        kind: UpstreamErrorKind = UpstreamErrorKind.OTHER,
        provider: str = "unknown",
    ):
        super().__init__(message)
        self.kind = kind
        self.provider = provider

    def __str__(self) -> str:
        return f"[{self.provider}:{self.kind.value}] {self.args[0]}"
