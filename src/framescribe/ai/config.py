"""Configuration loader for framescribe."""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import tomllib

from framescribe.ai.exceptions import API_KEY_ENV_VARS, ConfigError, MissingAPIKeyError
from framescribe.ai.retry import RetryPolicy
from framescribe.base.media import MediaKind
from framescribe.base.transcript import DEFAULT_SEGMENT_DELIMITER

DEFAULT_BASE_URL = "https://agent.helport.ai/v1"
DEFAULT_INTERVAL_SECONDS = 60

# Audio transcription jobs churn more upstream, so they get the more patient policy.
DEFAULT_RETRY_POLICIES: dict[MediaKind, RetryPolicy] = {
    MediaKind.IMAGE: RetryPolicy(max_attempts=5, delay=2.0),
    MediaKind.AUDIO: RetryPolicy(max_attempts=10, delay=3.0),
}

DEFAULT_INPUT_VARIABLES: dict[MediaKind, str] = {
    MediaKind.IMAGE: "image",
    MediaKind.AUDIO: "audio",
}


@dataclass(frozen=True)
class AnalyzerConfig:
    """Everything the remote analyzer client needs, passed in explicitly.

    Attributes:
        base_url: Root of the remote API, without trailing slash.
        api_keys: Bearer token per credential ('image', 'audio', 'upload').
        retry_policies: Retry policy per modality for the not-ready condition.
        input_variables: Workflow input variable name per modality.
        output_key: Key of the extracted text inside the workflow outputs.
        not_ready_marker: Substring of the nested failure message meaning the input is still being prepared.
        request_timeout: Total timeout for a single HTTP request, in seconds.
        max_concurrency: Cap on simultaneous analyzer calls, 0 for no cap.
    """

    base_url: str = DEFAULT_BASE_URL
    api_keys: dict[str, str] = field(default_factory=dict)
    retry_policies: dict[MediaKind, RetryPolicy] = field(default_factory=lambda: dict(DEFAULT_RETRY_POLICIES))
    input_variables: dict[MediaKind, str] = field(default_factory=lambda: dict(DEFAULT_INPUT_VARIABLES))
    output_key: str = "text"
    not_ready_marker: str = "not ready"
    request_timeout: float = 120.0
    max_concurrency: int = 0

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.max_concurrency < 0:
            raise ValueError("max_concurrency must be non-negative")

    def retry_policy(self, kind: MediaKind) -> RetryPolicy:
        return self.retry_policies.get(kind, DEFAULT_RETRY_POLICIES[kind])

    def api_key(self, credential: str) -> str:
        """Get the API key for a credential.

        Priority:
        1. Explicit value in ``api_keys``
        2. Environment variable

        Raises:
            MissingAPIKeyError: If no API key is found.
        """
        key = self.api_keys.get(credential)
        if key:
            return key

        env_var = API_KEY_ENV_VARS.get(credential)
        if env_var:
            key = os.environ.get(env_var)
            if key:
                return key

        raise MissingAPIKeyError(credential)


@dataclass(frozen=True)
class PipelineConfig:
    interval_seconds: int = DEFAULT_INTERVAL_SECONDS
    segment_delimiter: str = DEFAULT_SEGMENT_DELIMITER
    scratch_root: Path | None = None

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")


def _find_config_file() -> Path | None:
    """Find the configuration file in the current directory.

    Looks for:
    1. framescribe.toml
    2. pyproject.toml
    """
    cwd = Path.cwd()

    framescribe_toml = cwd / "framescribe.toml"
    if framescribe_toml.exists():
        return framescribe_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.exists():
        return pyproject_toml

    return None


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _extract_config(data: dict[str, Any], filename: str) -> dict[str, Any]:
    if filename == "framescribe.toml":
        return data
    elif filename == "pyproject.toml":
        return data.get("tool", {}).get("framescribe", {})
    return {}


@lru_cache(maxsize=1)
def _get_cached_config() -> dict[str, Any]:
    config_path = _find_config_file()
    if config_path is None:
        return {}

    try:
        data = _load_toml(config_path)
        return _extract_config(data, config_path.name)
    except tomllib.TOMLDecodeError as e:
        warnings.warn(f"Invalid TOML in config file {config_path}: {e}", RuntimeWarning)
        return {}
    except OSError as e:
        warnings.warn(f"Cannot read config file {config_path}: {e}", RuntimeWarning)
        return {}


def get_config() -> dict[str, Any]:
    """Get the raw ``framescribe`` configuration table."""
    return _get_cached_config()


def clear_config_cache() -> None:
    """Clear the configuration cache. Useful for testing."""
    _get_cached_config.cache_clear()


def _parse_retry_policies(raw: dict[str, Any]) -> dict[MediaKind, RetryPolicy]:
    policies = dict(DEFAULT_RETRY_POLICIES)
    for name, values in raw.items():
        try:
            kind = MediaKind(name)
        except ValueError as e:
            raise ConfigError(f"Unknown modality in [retry]: {name!r}") from e
        default = DEFAULT_RETRY_POLICIES[kind]
        try:
            policies[kind] = RetryPolicy(
                max_attempts=int(values.get("max_attempts", default.max_attempts)),
                delay=float(values.get("delay", default.delay)),
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Invalid retry policy for {name!r}: {e}") from e
    return policies


def analyzer_config_from_dict(data: dict[str, Any]) -> AnalyzerConfig:
    """Build an AnalyzerConfig from a ``framescribe`` table.

    Example:
        [tool.framescribe.analyzer]
        base_url = "https://agent.example.com/v1"
        max_concurrency = 8

        [tool.framescribe.analyzer.retry.audio]
        max_attempts = 12
        delay = 5.0
    """
    section = data.get("analyzer", {})
    try:
        return AnalyzerConfig(
            base_url=str(section.get("base_url", DEFAULT_BASE_URL)).rstrip("/"),
            api_keys={str(k): str(v) for k, v in section.get("api_keys", {}).items()},
            retry_policies=_parse_retry_policies(section.get("retry", {})),
            input_variables={
                **DEFAULT_INPUT_VARIABLES,
                **{MediaKind(k): str(v) for k, v in section.get("input_variables", {}).items()},
            },
            output_key=str(section.get("output_key", "text")),
            not_ready_marker=str(section.get("not_ready_marker", "not ready")),
            request_timeout=float(section.get("request_timeout", 120.0)),
            max_concurrency=int(section.get("max_concurrency", 0)),
        )
    except ValueError as e:
        raise ConfigError(f"Invalid analyzer configuration: {e}") from e


def pipeline_config_from_dict(data: dict[str, Any]) -> PipelineConfig:
    section = data.get("pipeline", {})
    scratch_root = section.get("scratch_root")
    try:
        return PipelineConfig(
            interval_seconds=int(section.get("interval_seconds", DEFAULT_INTERVAL_SECONDS)),
            segment_delimiter=str(section.get("segment_delimiter", DEFAULT_SEGMENT_DELIMITER)),
            scratch_root=Path(scratch_root) if scratch_root else None,
        )
    except ValueError as e:
        raise ConfigError(f"Invalid pipeline configuration: {e}") from e


def load_config() -> tuple[AnalyzerConfig, PipelineConfig]:
    """Load analyzer and pipeline configuration from the config file, or defaults."""
    data = get_config()
    return analyzer_config_from_dict(data), pipeline_config_from_dict(data)
