"""
Domain exceptions.

Every error carries a machine-readable ``kind``, an actionable ``hint`` for
the caller and an HTTP status. Raw details (response text, parsed payloads,
per-candidate errors) stay in ``detail`` and only go to the logs.
"""
from typing import Any, Optional


class FitPlanError(Exception):
    kind = "error"
    hint = "please try again"
    status_code = 500

    def __init__(self, message: Optional[str] = None, detail: Any = None):
        super().__init__(message or self.hint)
        self.message = message or self.hint
        self.detail = detail

    def to_dict(self) -> dict:
        return {"success": False, "error": self.message, "kind": self.kind, "hint": self.hint}


# --- generation ---

class GenerationError(FitPlanError):
    status_code = 502

    def __init__(self, message: Optional[str] = None, detail: Any = None, attempts: Optional[list] = None):
        super().__init__(message, detail)
        self.attempts = attempts or []


class QuotaExceeded(GenerationError):
    kind = "quota_exceeded"
    hint = "try again later or check plan limits"
    status_code = 429


class BackendNotFound(GenerationError):
    kind = "backend_not_found"
    hint = "the configured model is unavailable; check GENERATION_MODELS"


class BackendForbidden(GenerationError):
    kind = "backend_forbidden"
    hint = "check the API key and its permissions"


class NoWorkingBackend(GenerationError):
    kind = "unknown"
    hint = "no generation model responded; check the generation service"


class GenerationCancelled(GenerationError):
    kind = "cancelled"
    hint = "the request was cancelled"
    status_code = 499


class BackendNotConfigured(GenerationError):
    kind = "not_configured"
    hint = "set the API key for the selected GENERATION_PROVIDER"
    status_code = 500


# --- parsing ---

class MalformedResponse(FitPlanError):
    kind = "malformed_response"
    hint = "the model returned unreadable output; regenerate the plan"
    status_code = 502

    def __init__(self, message: Optional[str] = None, raw_text: str = ""):
        super().__init__(message, detail=raw_text)
        self.raw_text = raw_text


class InvalidPlanFormat(FitPlanError):
    kind = "invalid_plan_format"
    hint = "the model returned an unexpected plan structure; regenerate the plan"
    status_code = 502

    def __init__(self, message: Optional[str] = None, parsed: Any = None):
        super().__init__(message, detail=parsed)
        self.parsed = parsed


# --- persistence ---

class RemoteWriteFailed(FitPlanError):
    kind = "remote_write_failed"
    hint = "the cloud profile could not be updated; check your connection and retry"
    status_code = 502


class NotAuthenticated(FitPlanError):
    kind = "not_authenticated"
    hint = "sign in first"
    status_code = 401
