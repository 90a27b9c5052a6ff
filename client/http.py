"""HTTP access to the Bug Tracker API on ``httpx.AsyncClient``.

Every request attaches ``Authorization: Bearer <token>`` when the session
store holds a token. Non-2xx responses raise ``ApiError`` carrying the status
and the server's ``detail`` message; transport failures raise ``ApiError``
with ``status_code=None``. A 401 on a request that carried a token is
reported to ``on_unauthorized`` before the error is raised.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx

from api.utils.debug import print__client_debug
from client.config import BUGTRACKER_API_URL, REQUEST_TIMEOUT

NETWORK_ERROR_MESSAGE = "Unable to reach the server. Please check your connection."


class ApiError(Exception):
    """A failed API call. ``status_code`` is None for network failures."""

    def __init__(self, status_code: Optional[int], message: str, payload: Any = None):
        self.status_code = status_code
        self.message = message
        self.payload = payload
        super().__init__(message)

    @property
    def is_network_error(self) -> bool:
        return self.status_code is None

    def __repr__(self):
        return f"ApiError(status_code={self.status_code!r}, message={self.message!r})"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        if isinstance(detail, str) and detail:
            return detail
    return response.reason_phrase or f"Request failed with status {response.status_code}"


class ApiClient:
    """Thin JSON client; one short-lived ``httpx.AsyncClient`` per request."""

    def __init__(
        self,
        session_store,
        base_url: str = BUGTRACKER_API_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_unauthorized: Optional[Callable[[ApiError], None]] = None,
    ):
        self.session_store = session_store
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport
        self.on_unauthorized = on_unauthorized

    def _headers(self, token: Optional[str]) -> dict:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        token: Optional[str] = None,
        report_unauthorized: bool = True,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Args:
            token: explicit bearer token; defaults to the stored session token.
            report_unauthorized: pass a 401 to ``on_unauthorized``; credential
                endpoints turn this off since their 401 means bad credentials.

        Raises:
            ApiError: non-2xx status or network failure.
        """
        token = token if token is not None else self.session_store.token()
        print__client_debug(f"➡️ {method} {path} (auth={'yes' if token else 'no'})")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(
                    method, path, json=json, headers=self._headers(token)
                )
        except httpx.RequestError as exc:
            print__client_debug(f"❌ {method} {path} network error: {exc!r}")
            raise ApiError(None, NETWORK_ERROR_MESSAGE) from exc

        print__client_debug(f"⬅️ {method} {path} {response.status_code}")
        if response.is_success:
            return response.json() if response.content else None

        error = ApiError(response.status_code, _error_message(response))
        try:
            error.payload = response.json()
        except ValueError:
            pass

        if (
            response.status_code == 401
            and token
            and report_unauthorized
            and self.on_unauthorized is not None
        ):
            self.on_unauthorized(error)
        raise error

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("PUT", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.request("DELETE", path, **kwargs)
