"""
Error types raised by the scenario runner.

Nothing in the pipeline recovers locally: every error propagates to the
orchestrator, which records it in the run results and stops the run.

    ScenarioError
    ├── ConfigurationError
    │   └── MissingReferenceError
    ├── AuthenticationError
    ├── ApiError
    │   └── ConcurrentModificationError
    ├── ExtractionError
    └── PipelineAbortedError
"""

from typing import Any, Optional


class ScenarioError(Exception):
    """Base class for all scenario runner errors."""


class ConfigurationError(ScenarioError):
    """A required configuration value is missing or invalid."""


class MissingReferenceError(ConfigurationError):
    """A step needs a derived reference that was never created or has been invalidated."""

    def __init__(self, step_name: str, reference: str, reason: str = "not yet created"):
        self.step_name = step_name
        self.reference = reference
        self.reason = reason
        super().__init__(
            f"Step '{step_name}' requires reference '{reference}' which is {reason}"
        )


class AuthenticationError(ScenarioError):
    """The token endpoint rejected the client credentials or scope."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ApiError(ScenarioError):
    """A commercetools API call returned a non-success status or failed in transit.

    Attributes:
        status_code: HTTP status, or None if no response was received.
        method: HTTP method of the failed request.
        url: Request URL.
        body: Parsed error body (dict) or raw text, if any.
    """

    def __init__(
        self,
        status_code: Optional[int],
        method: str,
        url: str,
        body: Any = None,
        message: Optional[str] = None,
    ):
        self.status_code = status_code
        self.method = method
        self.url = url
        self.body = body
        detail = message or self._message_from_body(body)
        status = f"HTTP {status_code}" if status_code is not None else "no response"
        text = f"{method} {url} failed ({status})"
        if detail:
            text = f"{text}: {detail}"
        super().__init__(text)

    @staticmethod
    def _message_from_body(body: Any) -> str:
        if isinstance(body, dict):
            errors = body.get("errors") or []
            messages = [e.get("message", str(e)) for e in errors if isinstance(e, dict)]
            if messages:
                return "; ".join(messages)
            return body.get("message", "")
        if body:
            return str(body)[:200]
        return ""


class ConcurrentModificationError(ApiError):
    """HTTP 409: the request carried a stale resource version."""

    @property
    def current_version(self) -> Optional[int]:
        """The version the platform reported as current, if present in the error body."""
        if isinstance(self.body, dict):
            for error in self.body.get("errors") or []:
                if isinstance(error, dict) and "currentVersion" in error:
                    return error["currentVersion"]
        return None


class ExtractionError(ScenarioError):
    """An expected field is absent from an API response."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Field '{path}' not found in response")


class PipelineAbortedError(ScenarioError):
    """A pipeline step failed; no later steps were executed."""

    def __init__(self, step_name: str, step_index: int, cause: Exception):
        self.step_name = step_name
        self.step_index = step_index
        self.cause = cause
        super().__init__(f"Step {step_index + 1} '{step_name}' failed: {cause}")

    @property
    def status_code(self) -> Optional[int]:
        return getattr(self.cause, "status_code", None)
