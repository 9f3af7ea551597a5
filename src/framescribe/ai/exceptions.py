"""Exception hierarchy for framescribe.ai module."""

from __future__ import annotations

from typing import Any

from framescribe.base.exceptions import FrameScribeError

# Environment variable names per credential
API_KEY_ENV_VARS: dict[str, str] = {
    "image": "FRAMESCRIBE_IMAGE_API_KEY",
    "audio": "FRAMESCRIBE_AUDIO_API_KEY",
    "upload": "FRAMESCRIBE_UPLOAD_API_KEY",
}


class AnalyzerError(FrameScribeError):
    """Base exception for remote analyzer errors."""

    pass


class ConfigError(AnalyzerError):
    """Raised when there's an error loading or parsing configuration."""

    pass


class MissingAPIKeyError(AnalyzerError):
    """Raised when a required API key is not found."""

    def __init__(self, credential: str):
        env_var = API_KEY_ENV_VARS.get(credential, f"FRAMESCRIBE_{credential.upper()}_API_KEY")
        super().__init__(
            f"API key for '{credential}' not found. Set the {env_var} environment variable or pass it in the config."
        )
        self.credential = credential


class UploadError(AnalyzerError):
    """Raised when a clip cannot be uploaded. Never retried."""

    pass


class NotReadyError(AnalyzerError):
    """Raised when the service is still preparing the uploaded input."""

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class NonRetryableAnalysisError(AnalyzerError):
    """Raised for any failure payload that is not a transient not-ready condition."""

    def __init__(self, message: str, status: int | None = None, payload: Any = None):
        super().__init__(message)
        self.status = status
        self.payload = payload


class AnalysisTimeoutError(AnalyzerError):
    """Raised when the input is still not ready after the retry ceiling."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class RetryExhaustedError(FrameScribeError):
    """Raised by the retry helper when every attempt failed with a retryable error."""

    def __init__(self, last_error: Exception, attempts: int):
        super().__init__(f"Gave up after {attempts} attempts: {last_error}")
        self.last_error = last_error
        self.attempts = attempts
