"""Retry-worthiness classifier.

Pure and synchronous. Callers decide whether and how to retry; this module
only tells transient failures apart from permanent ones.
"""

from __future__ import annotations

from typing import Any, Mapping

from servicecall.core.domain.errors import CallError, CallErrorKind
from servicecall.core.domain.models import NormalizedResponse

# 500-class messages that a retry never fixes.
NO_RETRY_MESSAGES = frozenset(
    {
        "Argument passed in must be a single String of 12 bytes or a string of 24 hex characters",
        "Invalid client",
    }
)

# Resolution failures that repeat identically on every attempt.
NO_RETRY_KINDS = frozenset({CallErrorKind.DISCOVERY_CONFIG_INVALID, CallErrorKind.ENDPOINT_NOT_FOUND})


def should_retry(outcome: Any = None) -> bool:
    """True when `outcome` looks transient.

    - invalid discovery config or endpoint not found: False
    - no status code (bare exception, transport error, lookup failure,
      missing secret, unknown object): True
    - status >= 500 and message not in `NO_RETRY_MESSAGES`: True
    - anything else (4xx, excluded 5xx, success): False
    """

    if isinstance(outcome, CallError) and outcome.kind in NO_RETRY_KINDS:
        return False

    status_code, message = _status_and_message(outcome)
    if not status_code:
        return True
    return status_code >= 500 and message not in NO_RETRY_MESSAGES


def _status_and_message(outcome: Any) -> tuple[int | None, str]:
    if isinstance(outcome, CallError):
        return outcome.status_code, outcome.remote_message or ""
    if isinstance(outcome, NormalizedResponse):
        return outcome.status_code, _body_message(outcome.body)
    if isinstance(outcome, Mapping):
        status = outcome.get("statusCode", outcome.get("status_code"))
        return _as_int(status), _body_message(outcome.get("body"))
    return _as_int(getattr(outcome, "status_code", None)), _body_message(getattr(outcome, "body", None))


def _body_message(body: Any) -> str:
    if isinstance(body, Mapping):
        message = body.get("message")
        if message:
            return str(message)
    return ""


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
