# nextgenfit/utils/model_fallback.py
"""
Ordered model fallback.

Candidates are tried strictly one after another, one attempt each, until one
returns text. The outcome is a value, not a side effect: ``Success`` carries the
text and the model that produced it, ``Failure`` carries every classified error.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence

from nextgenfit.core.exceptions import (
    BackendForbidden,
    BackendNotConfigured,
    BackendNotFound,
    GenerationCancelled,
    GenerationError,
    NoWorkingBackend,
    QuotaExceeded,
)

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    QUOTA_EXCEEDED = "quota_exceeded"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CandidateError:
    backend_id: str
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Success:
    text: str
    backend_id: str
    failed_attempts: tuple = ()


@dataclass(frozen=True)
class Failure:
    errors: tuple = ()


_STATUS_KINDS = {429: ErrorKind.QUOTA_EXCEEDED, 404: ErrorKind.NOT_FOUND, 403: ErrorKind.FORBIDDEN}

_MESSAGE_MARKERS = (
    (ErrorKind.QUOTA_EXCEEDED, ("429", "quota", "resource_exhausted", "rate limit")),
    (ErrorKind.NOT_FOUND, ("404", "not found", "not_found")),
    (ErrorKind.FORBIDDEN, ("403", "forbidden", "permission")),
)


def _status_of(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def classify_error(exc: BaseException) -> ErrorKind:
    """HTTP status first, then the message text (SDKs differ in what they expose)."""
    status = _status_of(exc)
    if status in _STATUS_KINDS:
        return _STATUS_KINDS[status]

    message = str(exc).lower()
    for kind, markers in _MESSAGE_MARKERS:
        if any(marker in message for marker in markers):
            return kind
    return ErrorKind.UNKNOWN


GenerateFn = Callable[[str, str], Awaitable[str]]


async def invoke_with_fallback(
    prompt: str,
    candidates: Sequence[str],
    generate: GenerateFn,
    timeout: Optional[float] = None,
    cancel_event: Optional[asyncio.Event] = None,
    errors: tuple = (),
) -> Success | Failure:
    if not candidates:
        return Failure(errors)

    if cancel_event is not None and cancel_event.is_set():
        raise GenerationCancelled("Plan generation was cancelled", attempts=list(errors))

    backend_id, rest = candidates[0], candidates[1:]
    try:
        if timeout:
            text = await asyncio.wait_for(generate(backend_id, prompt), timeout=timeout)
        else:
            text = await generate(backend_id, prompt)
    except BackendNotConfigured:
        raise
    except asyncio.TimeoutError:
        error = CandidateError(backend_id, ErrorKind.UNKNOWN, f"timed out after {timeout}s")
    except Exception as e:
        error = CandidateError(backend_id, classify_error(e), str(e))
    else:
        logger.info("Generation succeeded with model %s (after %d failed attempts)", backend_id, len(errors))
        return Success(text=text, backend_id=backend_id, failed_attempts=errors)

    logger.warning("Model %s failed [%s]: %s", error.backend_id, error.kind.value, error.message)
    return await invoke_with_fallback(prompt, rest, generate, timeout, cancel_event, errors + (error,))


def failure_to_error(failure: Failure) -> GenerationError:
    """Quota beats everything, then the last observed error, then a generic one."""
    attempts = list(failure.errors)
    tried = ", ".join(e.backend_id for e in attempts)

    if any(e.kind is ErrorKind.QUOTA_EXCEEDED for e in attempts):
        return QuotaExceeded(f"Generation quota exceeded for all models ({tried})", attempts=attempts)
    if not attempts:
        return NoWorkingBackend("No working generation model is configured", attempts=attempts)

    last = attempts[-1]
    if last.kind is ErrorKind.NOT_FOUND:
        return BackendNotFound(f"Model '{last.backend_id}' was not found (tried: {tried})", detail=last.message, attempts=attempts)
    if last.kind is ErrorKind.FORBIDDEN:
        return BackendForbidden(f"Access to model '{last.backend_id}' was denied (tried: {tried})", detail=last.message, attempts=attempts)
    return NoWorkingBackend(f"No generation model responded (tried: {tried})", detail=last.message, attempts=attempts)


async def generate_with_fallback(
    prompt: str,
    candidates: Sequence[str],
    generate: GenerateFn,
    timeout: Optional[float] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> Success:
    outcome = await invoke_with_fallback(prompt, list(candidates), generate, timeout, cancel_event)
    if isinstance(outcome, Failure):
        error = failure_to_error(outcome)
        logger.error("All generation models failed: %s", [(e.backend_id, e.kind.value, e.message) for e in outcome.errors])
        raise error
    return outcome
