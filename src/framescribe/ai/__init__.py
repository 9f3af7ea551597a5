from .client import RemoteAnalyzerClient, parse_workflow_response
from .config import AnalyzerConfig, PipelineConfig, clear_config_cache, get_config, load_config
from .exceptions import (
    AnalysisTimeoutError,
    AnalyzerError,
    ConfigError,
    MissingAPIKeyError,
    NonRetryableAnalysisError,
    NotReadyError,
    RetryExhaustedError,
    UploadError,
)
from .pipeline import TranscriptionOutcome, TranscriptPipeline, transcribe_video
from .retry import RetryPolicy, retry_async

__all__ = [
    # Exceptions
    "AnalyzerError",
    "ConfigError",
    "MissingAPIKeyError",
    "UploadError",
    "NotReadyError",
    "NonRetryableAnalysisError",
    "AnalysisTimeoutError",
    "RetryExhaustedError",
    # Configuration
    "AnalyzerConfig",
    "PipelineConfig",
    "RetryPolicy",
    "get_config",
    "load_config",
    "clear_config_cache",
    # Remote analysis
    "RemoteAnalyzerClient",
    "parse_workflow_response",
    "retry_async",
    # Pipeline
    "TranscriptPipeline",
    "TranscriptionOutcome",
    "transcribe_video",
]
