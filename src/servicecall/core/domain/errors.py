"""Error taxonomy for service calls.

Every failure the client surfaces is a `CallError`. Status code, remote
message and cause travel as attributes, so callers (and the retry classifier)
can branch on fields instead of parsing the formatted message.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class CallErrorKind(str, Enum):
    """Which stage of the pipeline failed."""

    DISCOVERY_CONFIG_INVALID = "DiscoveryConfigInvalid"
    ENDPOINT_NOT_FOUND = "EndpointNotFound"
    ENDPOINT_LOOKUP_FAILED = "EndpointLookupFailed"
    REMOTE_CALL_FAILED = "RemoteCallFailed"


class CallErrorCode(IntEnum):
    """Numeric classification codes. Stable across a major version."""

    INVALID_DISCOVERY_CONFIG = 1
    ENDPOINT_NOT_FOUND = 2
    ENDPOINT_REQUEST_FAILED = 3
    REQUEST_LIB_ERROR = 4
    MICROSERVICE_FAILED = 5
    SECRET_MISSING = 6


class CallError(Exception):
    """Failure raised by resolution, transport or a remote error status.

    Attributes:
    - kind: pipeline stage (`CallErrorKind`).
    - code: numeric classification (`CallErrorCode`).
    - status_code: HTTP status of the remote response, when there was one.
    - remote_message: message extracted from the remote body, when there was one.
    - cause: wrapped lower-level exception (also set as `__cause__` by callers
      that use `raise ... from`).
    """

    def __init__(
        self,
        message: str,
        *,
        kind: CallErrorKind,
        code: CallErrorCode,
        status_code: int | None = None,
        remote_message: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.code = code
        self.status_code = status_code
        self.remote_message = remote_message
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"CallError(kind={self.kind.value!r}, code={int(self.code)}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )

    @classmethod
    def discovery_config_invalid(cls, message: str) -> "CallError":
        return cls(
            message,
            kind=CallErrorKind.DISCOVERY_CONFIG_INVALID,
            code=CallErrorCode.INVALID_DISCOVERY_CONFIG,
        )

    @classmethod
    def endpoint_not_found(cls, message: str, *, status_code: int | None = None) -> "CallError":
        return cls(
            message,
            kind=CallErrorKind.ENDPOINT_NOT_FOUND,
            code=CallErrorCode.ENDPOINT_NOT_FOUND,
            status_code=status_code,
        )

    @classmethod
    def endpoint_lookup_failed(cls, cause: BaseException) -> "CallError":
        return cls(
            f"Endpoint lookup failed: {cause}",
            kind=CallErrorKind.ENDPOINT_LOOKUP_FAILED,
            code=CallErrorCode.ENDPOINT_REQUEST_FAILED,
            cause=cause,
        )

    @classmethod
    def request_failed(cls, cause: BaseException) -> "CallError":
        return cls(
            f"Request failed: {cause}",
            kind=CallErrorKind.REMOTE_CALL_FAILED,
            code=CallErrorCode.REQUEST_LIB_ERROR,
            cause=cause,
        )

    @classmethod
    def remote_failed(cls, status_code: int, remote_message: str) -> "CallError":
        return cls(
            f"Microservice failed ({status_code}): {remote_message}",
            kind=CallErrorKind.REMOTE_CALL_FAILED,
            code=CallErrorCode.MICROSERVICE_FAILED,
            status_code=status_code,
            remote_message=remote_message,
        )

    @classmethod
    def secret_missing(cls, cause: BaseException | None = None) -> "CallError":
        return cls(
            "Microservice failed: Secret is missing",
            kind=CallErrorKind.REMOTE_CALL_FAILED,
            code=CallErrorCode.SECRET_MISSING,
            cause=cause,
        )
