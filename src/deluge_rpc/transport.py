"""HTTP session transport for the Deluge web daemon.

Every exchange is preceded by a ``web.connected`` probe. When the probe
reports an error the transport logs in once with ``auth.login`` and probes
again before sending the caller's payload. All requests share one cookie jar,
optionally persisted to a Mozilla-format cookie file.
"""

from __future__ import annotations

import enum
import logging
import threading
from http.cookiejar import CookieJar, LoadError, MozillaCookieJar
from pathlib import Path
from typing import Any

import httpx

from .config import ConnectionParameters
from .errors import (
    DelugeConnectionError,
    RequestDetails,
    RequestError,
    RequestTimeoutError,
    ResponseError,
    SessionError,
)
from .protocols import IdGenerator
from .rpc import RequestIdGenerator, build_request, decode_response, encode_request

PROBE_METHOD = "web.connected"
LOGIN_METHOD = "auth.login"
LOGIN_SUCCESS = True

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class SessionState(enum.Enum):
    DISCONNECTED = "disconnected"
    PROBED_CONNECTED = "probed-connected"
    PROBED_UNAUTHENTICATED = "probed-unauthenticated"


class SessionTransport:
    """Authenticated JSON-RPC exchanges over one persistent HTTP session.

    Calls on one instance are serialized: the probe, the optional login and
    the payload are sent under a single lock.
    """

    def __init__(
        self,
        parameters: ConnectionParameters,
        *,
        http_client: httpx.Client | None = None,
        id_generator: IdGenerator | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._parameters = parameters
        self._client = http_client
        self._owns_client = http_client is None
        self._ids = id_generator or RequestIdGenerator()
        self._logger = logger or logging.getLogger(__name__)
        self._cookie_jar: CookieJar | None = None
        self._lock = threading.Lock()
        self.state = SessionState.DISCONNECTED

    @property
    def parameters(self) -> ConnectionParameters:
        return self._parameters

    @property
    def cookies(self) -> CookieJar | None:
        return self._cookie_jar

    def exchange(self, payload: bytes) -> bytes:
        with self._lock:
            client = self._ensure_client()
            if self._probe(client):
                return self._post(client, payload)

            if not self._login(client):
                raise SessionError(
                    "Unable to log in to the Deluge server: invalid credentials or unreachable server"
                )

            if not self._probe(client):
                raise SessionError(
                    "Login to the Deluge server succeeded but the session could not be persisted; "
                    "check that the cookie store is readable and writable"
                )
            return self._post(client, payload)

    def close(self) -> None:
        with self._lock:
            if self._client is not None and self._owns_client:
                self._client.close()
                self._client = None
            self.state = SessionState.DISCONNECTED

    def __enter__(self) -> "SessionTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_client(self) -> httpx.Client:
        if self._cookie_jar is None:
            if self._client is not None and self._parameters.cookie_path is None:
                self._cookie_jar = self._client.cookies.jar
            else:
                self._cookie_jar = self._open_cookie_jar()

        if self._client is None:
            try:
                self._client = httpx.Client(
                    timeout=self._parameters.timeout_seconds or None,
                    headers=_JSON_HEADERS,
                    cookies=self._cookie_jar,
                )
            except (httpx.HTTPError, ValueError) as error:
                raise DelugeConnectionError(f"Unable to create HTTP client: {error}") from error
            self._owns_client = True
            self._logger.debug("created HTTP session for %s", self._parameters.url)
        elif self._client.cookies.jar is not self._cookie_jar:
            # A CookieJar is adopted as-is, so saving it persists what httpx collected.
            self._client.cookies = self._cookie_jar
        return self._client

    def _open_cookie_jar(self) -> CookieJar:
        cookie_path = self._parameters.cookie_path
        if cookie_path is None:
            return CookieJar()

        jar = MozillaCookieJar(cookie_path)
        if Path(cookie_path).exists():
            try:
                jar.load(ignore_discard=True, ignore_expires=False)
            except (OSError, LoadError) as error:
                raise DelugeConnectionError(f"Unable to read cookie store {cookie_path}: {error}") from error
            self._logger.debug("loaded %d cookies from %s", len(jar), cookie_path)
        return jar

    def _save_cookies(self) -> None:
        jar = self._cookie_jar
        if not isinstance(jar, MozillaCookieJar):
            return
        try:
            jar.save(ignore_discard=True)
        except OSError as error:
            raise SessionError(f"Unable to write cookie store {jar.filename}: {error}") from error

    def _probe(self, client: httpx.Client) -> bool:
        raw = self._post(client, self._envelope(PROBE_METHOD, []))
        try:
            response = decode_response(raw)
        except ResponseError:
            self._logger.debug("undecodable %s response, treating session as unauthenticated", PROBE_METHOD)
            response = None

        if response is None or response.is_error:
            self.state = SessionState.PROBED_UNAUTHENTICATED
        else:
            self.state = SessionState.PROBED_CONNECTED
        self._logger.debug("session probe: %s", self.state.value)
        return self.state is SessionState.PROBED_CONNECTED

    def _login(self, client: httpx.Client) -> bool:
        raw = self._post(client, self._envelope(LOGIN_METHOD, [self._parameters.password or ""]))
        try:
            response = decode_response(raw)
        except ResponseError:
            self._logger.warning("undecodable %s response", LOGIN_METHOD)
            return False

        if response.is_error or response.result != LOGIN_SUCCESS:
            self._logger.warning("login to %s was rejected", self._parameters.url)
            return False
        self._logger.debug("logged in to %s", self._parameters.url)
        return True

    def _envelope(self, method: str, params: list[Any]) -> bytes:
        return encode_request(build_request(method, params, self._ids.next_id()))

    def _post(self, client: httpx.Client, payload: bytes) -> bytes:
        url = self._parameters.url
        try:
            response = client.post(
                url,
                content=payload,
                headers=_JSON_HEADERS,
                timeout=self._parameters.timeout_seconds or None,
            )
        except httpx.TimeoutException as error:
            raise RequestTimeoutError(
                f"Request to {url} timed out: {error}", details=RequestDetails(url=url)
            ) from error
        except httpx.ConnectError as error:
            raise DelugeConnectionError(f"Unable to connect to Deluge server at {url}: {error}") from error
        except httpx.HTTPError as error:
            raise RequestError(
                f"Could not make a request to {url}: {error}", details=RequestDetails(url=url)
            ) from error

        self._save_cookies()

        if not 200 <= response.status_code < 300:
            raise RequestError(
                f"Request to {url} failed with status {response.status_code}",
                details=RequestDetails(
                    url=url,
                    method="POST",
                    status_code=response.status_code,
                    response_body=response.text,
                ),
            )
        if not response.content:
            raise RequestError(
                f"Empty response from {url}",
                details=RequestDetails(url=url, method="POST", status_code=response.status_code),
            )
        return response.content
