"""Responses API backend over HTTP."""

import json
import logging
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from .. import __version__
from ..exceptions import BackendConnectionError, BackendStatusError
from ..models.responses import ResponseStreamEvent
from ..utils import classify_error

from .base import BackendStream, BaseBackend

logger = logging.getLogger(__name__)


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _status_error(response: httpx.Response, body: Any) -> BackendStatusError:
    message = ""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            message = str(error.get("message") or "")
        elif error:
            message = str(error)
        else:
            message = str(body.get("message") or "")
    elif body:
        message = str(body)
    classified = classify_error(message, response.status_code)
    if message:
        classified = f"{classified} ({message})"
    return BackendStatusError(classified, status_code=response.status_code, body=body)


class SSEResponseStream(BackendStream):
    """Server-sent event stream read from an open httpx response."""

    def __init__(self, response: httpx.Response, request_id: str = ""):
        self._response = response
        self._request_id = request_id
        self._aborted = False

    @property
    def aborted(self) -> bool:
        return self._aborted

    async def abort(self) -> None:
        if self._aborted:
            return
        self._aborted = True
        if self._response.is_closed:
            return
        logger.info(f"[{self._request_id}] stream aborted by caller")
        await self._response.aclose()

    async def events(self) -> AsyncIterator[ResponseStreamEvent]:
        event_name: Optional[str] = None
        try:
            async for line in self._response.aiter_lines():
                if self._aborted:
                    break
                if not line:
                    event_name = None
                    continue
                if line.startswith("event:"):
                    event_name = line[6:].strip()
                    continue
                if not line.startswith("data:"):
                    continue
                data = line[5:].strip()
                if data == "[DONE]":
                    logger.debug(f"[{self._request_id}] stream completed with [DONE] signal")
                    break
                try:
                    payload = json.loads(data)
                except json.JSONDecodeError as e:
                    logger.error(f"[{self._request_id}] JSONDecodeError in stream: {e}")
                    continue
                if not isinstance(payload, dict):
                    continue
                if "type" not in payload and event_name:
                    payload["type"] = event_name
                if "type" not in payload:
                    continue
                yield ResponseStreamEvent.model_validate(payload)
        except httpx.TransportError as e:
            if self._aborted:
                return
            logger.error(f"[{self._request_id}] Transport error reading stream: {e}")
            raise BackendConnectionError(classify_error(str(e))) from e
        except Exception:
            # Reads racing an abort fail on the closed response.
            if not self._aborted:
                raise
        finally:
            await self._response.aclose()


class HTTPResponsesBackend(BaseBackend):
    """Talks to ``{base_url}/responses`` with httpx."""

    def get_headers(self) -> Dict[str, str]:
        """Get HTTP headers for API requests."""
        headers = {
            "Content-Type": "application/json",
            "User-Agent": f"completion-compat/{__version__}",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def create(self, body: Dict[str, Any], request_id: str = "") -> Dict[str, Any]:
        """POST a non-streaming request and return the decoded response."""
        url = f"{self.base_url}/responses"
        logger.debug(f"[{request_id}] POST {url} body={body}")
        try:
            response = await self.client.post(url, json=body, headers=self.get_headers())
        except httpx.TransportError as e:
            logger.error(f"[{request_id}] Transport error calling backend: {e}")
            raise BackendConnectionError(classify_error(str(e))) from e

        if response.is_error:
            error = _status_error(response, _decode_body(response))
            logger.error(f"[{request_id}] Backend returned {response.status_code}: {error}")
            raise error

        data = response.json()
        logger.debug(f"[{request_id}] Backend response: {data}")
        return data

    async def create_stream(self, body: Dict[str, Any], request_id: str = "") -> SSEResponseStream:
        """Open a streaming request; the returned stream owns the response."""
        url = f"{self.base_url}/responses"
        body = dict(body, stream=True)
        logger.debug(f"[{request_id}] POST {url} (stream) body={body}")
        request = self.client.build_request("POST", url, json=body, headers=self.get_headers())
        try:
            response = await self.client.send(request, stream=True)
        except httpx.TransportError as e:
            logger.error(f"[{request_id}] Transport error opening stream: {e}")
            raise BackendConnectionError(classify_error(str(e))) from e

        if response.is_error:
            await response.aread()
            await response.aclose()
            error = _status_error(response, _decode_body(response))
            logger.error(f"[{request_id}] Backend returned {response.status_code}: {error}")
            raise error

        return SSEResponseStream(response, request_id=request_id)
