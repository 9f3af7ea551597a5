"""Client for the remote captioning and transcription workflows."""

from __future__ import annotations

import asyncio
import json
import logging
import mimetypes
from typing import Any, Awaitable, Callable

import aiofiles
import aiohttp

from framescribe.ai.config import AnalyzerConfig
from framescribe.ai.exceptions import (
    AnalysisTimeoutError,
    AnalyzerError,
    NonRetryableAnalysisError,
    NotReadyError,
    RetryExhaustedError,
    UploadError,
)
from framescribe.ai.retry import retry_async
from framescribe.base.media import MediaClip, MediaKind
from framescribe.base.transcript import AnalysisResult

logger = logging.getLogger(__name__)

UPLOAD_CREDENTIAL = "upload"


def _decode_detail(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _failure_parts(payload: Any) -> tuple[str, Any]:
    """Return the top-level failure message and the nested detail payload."""
    if not isinstance(payload, dict):
        return str(payload or "empty response"), None

    data = payload.get("data") if isinstance(payload.get("data"), dict) else {}
    message = payload.get("message") or data.get("error") or payload.get("error") or "unknown error"

    for candidate in (payload.get("detail"), data.get("error"), payload.get("error")):
        if candidate:
            return str(message), _decode_detail(candidate)
    return str(message), None


def _detail_message(detail: Any) -> str:
    if isinstance(detail, dict):
        return str(detail.get("message") or "")
    if isinstance(detail, str):
        return detail
    return ""


def parse_workflow_response(
    status: int, payload: Any, *, output_key: str = "text", not_ready_marker: str = "not ready"
) -> str:
    """Interpret a workflow reply.

    Returns:
        The extracted text of a successful run.

    Raises:
        NotReadyError: If the nested failure message says the input is still being prepared.
        NonRetryableAnalysisError: For every other failure.
    """
    data = payload.get("data") if isinstance(payload, dict) else None

    if 200 <= status < 300 and isinstance(data, dict) and data.get("status") == "succeeded":
        outputs = data.get("outputs")
        text = outputs.get(output_key) if isinstance(outputs, dict) else None
        if text is None:
            raise NonRetryableAnalysisError(
                f"Workflow succeeded without a '{output_key}' output", status=status, payload=payload
            )
        return str(text).strip()

    message, detail = _failure_parts(payload)
    if not_ready_marker.lower() in _detail_message(detail).lower():
        raise NotReadyError(message, payload=payload)
    raise NonRetryableAnalysisError(message, status=status, payload=payload)


class RemoteAnalyzerClient:
    """Uploads clips and runs captioning or transcription workflows on them.

    Each ``analyze`` call is independent, so any number may run concurrently.
    Use as an async context manager to own the underlying HTTP session.

    Example:
        >>> async with RemoteAnalyzerClient(AnalyzerConfig()) as client:
        ...     result = await client.analyze(clip, MediaKind.IMAGE, user="user-1")
    """

    def __init__(
        self,
        config: AnalyzerConfig,
        session: aiohttp.ClientSession | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ):
        self.config = config
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep
        self._semaphore = asyncio.Semaphore(config.max_concurrency) if config.max_concurrency > 0 else None

    async def __aenter__(self) -> RemoteAnalyzerClient:
        self._get_session()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.request_timeout)
            )
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _headers(self, credential: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.config.api_key(credential)}"}

    async def upload(self, clip: MediaClip, user: str) -> str:
        """Upload the clip's bytes and return the remote file id.

        Raises:
            UploadError: On any transport, HTTP or payload problem. Not retried.
        """
        url = f"{self.config.base_url}/files/upload"
        headers = self._headers(UPLOAD_CREDENTIAL)

        try:
            async with aiofiles.open(clip.path, "rb") as f:
                content = await f.read()
        except OSError as e:
            raise UploadError(f"Cannot read clip {clip.path}: {e}") from e

        content_type = mimetypes.guess_type(clip.path.name)[0] or "application/octet-stream"
        form = aiohttp.FormData()
        form.add_field("file", content, filename=clip.path.name, content_type=content_type)
        form.add_field("user", user)

        try:
            async with self._get_session().post(url, data=form, headers=headers) as response:
                status = response.status
                payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise UploadError(f"Upload of {clip.path.name} failed: {e}") from e

        if status >= 400:
            raise UploadError(f"Upload of {clip.path.name} failed with HTTP {status}: {payload}")
        file_id = payload.get("id") if isinstance(payload, dict) else None
        if not file_id:
            raise UploadError(f"Upload of {clip.path.name} returned no file id: {payload}")

        logger.debug("Uploaded %s as %s", clip.path.name, file_id)
        return str(file_id)

    async def _post_workflow(self, kind: MediaKind, file_id: str, user: str) -> tuple[int, Any]:
        """Send one workflow run request and return the HTTP status and decoded body."""
        url = f"{self.config.base_url}/workflows/run"
        body = {
            "inputs": {
                self.config.input_variables[kind]: {
                    "type": kind.value,
                    "transfer_method": "local_file",
                    "upload_file_id": file_id,
                }
            },
            "response_mode": "blocking",
            "user": user,
        }

        try:
            async with self._get_session().post(url, json=body, headers=self._headers(kind.value)) as response:
                return response.status, await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise NonRetryableAnalysisError(f"Workflow request failed: {e}") from e

    async def submit(self, kind: MediaKind, file_id: str, user: str) -> str:
        """Run the modality's workflow against an uploaded file once."""
        status, payload = await self._post_workflow(kind, file_id, user)
        return parse_workflow_response(
            status,
            payload,
            output_key=self.config.output_key,
            not_ready_marker=self.config.not_ready_marker,
        )

    async def analyze(self, clip: MediaClip, kind: MediaKind, user: str) -> AnalysisResult:
        """Upload ``clip`` and run the ``kind`` workflow on it.

        Only the submit step is retried, and only while the service reports the
        input as not ready. Failures are returned as a failed AnalysisResult.
        """
        if self._semaphore is None:
            return await self._analyze(clip, kind, user)
        async with self._semaphore:
            return await self._analyze(clip, kind, user)

    async def _analyze(self, clip: MediaClip, kind: MediaKind, user: str) -> AnalysisResult:
        description = f"{kind.value} analysis of {clip.window}"
        try:
            file_id = await self.upload(clip, user)
            text = await retry_async(
                lambda: self.submit(kind, file_id, user),
                self.config.retry_policy(kind),
                lambda e: isinstance(e, NotReadyError),
                sleep=self._sleep,
                description=description,
            )
        except RetryExhaustedError as e:
            error = AnalysisTimeoutError(
                f"{description} still not ready after {e.attempts} attempts", attempts=e.attempts
            )
            logger.error("%s", error)
            return AnalysisResult.failed(clip.window, kind, error)
        except NonRetryableAnalysisError as e:
            logger.error("%s failed (HTTP %s): %s; payload=%s", description, e.status, e, e.payload)
            return AnalysisResult.failed(clip.window, kind, e)
        except AnalyzerError as e:
            logger.error("%s failed: %s", description, e)
            return AnalysisResult.failed(clip.window, kind, e)

        logger.debug("%s finished with %d characters", description, len(text))
        return AnalysisResult(window=clip.window, kind=kind, text=text)
