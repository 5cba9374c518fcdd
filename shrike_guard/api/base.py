"""Shared HTTP plumbing for the management API clients.

Every request carries the same headers as a scan request (bearer key, SDK
identification, request id). Responses are decoded as JSON; a non-2xx status
raises ShrikeAPIError with the backend's ``message`` field when it sends one.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from shrike_guard.config import validate_endpoint
from shrike_guard.constants import DEFAULT_API_TIMEOUT_MS, DEFAULT_ENDPOINT
from shrike_guard.errors import ShrikeAPIError
from shrike_guard.scanner.transport import get_scan_headers
from shrike_guard.utils.logger import PerformanceLogger, get_logger
from shrike_guard.utils.trace import generate_trace_id

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseClient:
    """Base API client with common HTTP functionality.

    Args:
        api_key:     Customer or agent API key. Empty for unauthenticated calls
                     (register, login).
        base_url:    Backend base URL. Trailing slash stripped; a malformed URL
                     raises ShrikeConfigError here.
        timeout_ms:  Per-request timeout.
        http_client: httpx.AsyncClient to use (caller keeps ownership).
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: Optional[str] = None,
        timeout_ms: int = DEFAULT_API_TIMEOUT_MS,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key or ""
        self._base_url = validate_endpoint(base_url or DEFAULT_ENDPOINT)
        self._timeout_s = (timeout_ms or DEFAULT_API_TIMEOUT_MS) / 1000
        self._owns_http_client = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout_s),
            follow_redirects=False,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> Any:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def request(self, method: str, path: str, body: Any = None) -> Any:
        """Send one request and return the decoded JSON body (None when empty).

        Raises:
            ShrikeAPIError: Timeout, transport failure, non-2xx status or a
                            body that is not JSON.
        """
        url = f"{self._base_url}{path}"
        trace_id = generate_trace_id()
        try:
            with PerformanceLogger(f"API {method} {path}", logger):
                response = await self._http.request(
                    method,
                    url,
                    json=body,
                    headers=get_scan_headers(self._api_key, trace_id),
                    timeout=self._timeout_s,
                )
        except httpx.TimeoutException as exc:
            raise ShrikeAPIError(
                f"API request timed out: {method} {path}",
                {"method": method, "path": path},
            ) from exc
        except httpx.HTTPError as exc:
            raise ShrikeAPIError(
                f"API request failed: {str(exc) or type(exc).__name__}",
                {"method": method, "path": path},
            ) from exc

        if not response.is_success:
            message = _error_message(response)
            logger.warning(
                "api_request_failed",
                method=method,
                path=path,
                status_code=response.status_code,
                trace_id=trace_id,
            )
            raise ShrikeAPIError(
                message,
                {"method": method, "path": path},
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ShrikeAPIError(
                f"API returned a body that is not valid JSON: {method} {path}",
                {"method": method, "path": path},
                status_code=response.status_code,
            ) from exc

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.request("POST", path, body)

    async def put(self, path: str, body: Any = None) -> Any:
        return await self.request("PUT", path, body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)


def _error_message(response: httpx.Response) -> str:
    """The backend ``message`` field, else the status reason, else a generic text."""
    try:
        body = response.json()
    except ValueError:
        message = response.reason_phrase
    else:
        message = body.get("message") if isinstance(body, dict) else None
    return message or f"API error: {response.status_code}"


def parse_model(model: type[ModelT], data: Any) -> ModelT:
    """Validate a response body into ``model``. Raises ShrikeAPIError on mismatch."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ShrikeAPIError(
            f"Unexpected {model.__name__} response: {exc.error_count()} validation error(s)"
        ) from exc


def parse_models(model: type[ModelT], data: Any) -> list[ModelT]:
    """Validate a JSON array response into a list of ``model``."""
    try:
        return TypeAdapter(list[model]).validate_python(data)  # type: ignore[valid-type]
    except ValidationError as exc:
        raise ShrikeAPIError(
            f"Unexpected {model.__name__} list response: {exc.error_count()} validation error(s)"
        ) from exc


def dump_request(request: BaseModel) -> dict[str, Any]:
    """Serialize a request model, leaving out fields the caller did not set."""
    return request.model_dump(exclude_none=True)
