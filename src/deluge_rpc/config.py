"""Connection parameters for the Deluge web daemon."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import ConfigurationError

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8181
DEFAULT_ENDPOINT_PATH = "/json"
DEFAULT_TIMEOUT_SECONDS = 15.0

# Mapping keys accepted by from_mapping(); anything else is dropped.
_KEY_ALIASES: dict[str, str] = {
    "host": "host",
    "port": "port",
    "user": "user",
    "pass": "password",
    "cookiePath": "cookie_path",
    "cookie_path": "cookie_path",
    "timeout": "timeout_seconds",
}


@dataclass(frozen=True, slots=True)
class ConnectionParameters:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    user: str | None = None
    password: str | None = None
    cookie_path: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    endpoint_path: str = DEFAULT_ENDPOINT_PATH

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}{self.endpoint_path}"

    @classmethod
    def from_mapping(cls, parameters: Any) -> "ConnectionParameters":
        if not isinstance(parameters, Mapping):
            raise ConfigurationError(
                f"connection parameters must be a mapping, got {type(parameters).__name__}"
            )

        values: dict[str, Any] = {}
        for key, value in parameters.items():
            field_name = _KEY_ALIASES.get(key) if isinstance(key, str) else None
            if field_name is None or value is None:
                continue
            values[field_name] = value

        host = values.get("host", DEFAULT_HOST)
        if not isinstance(host, str) or not host.strip():
            raise ConfigurationError(f"invalid host {host!r}")

        return cls(
            host=host.strip(),
            port=_parse_port(values.get("port", DEFAULT_PORT)),
            user=_trim_or_none(values.get("user")),
            password=_string_or_none(values.get("password"), "pass"),
            cookie_path=_path_or_none(values.get("cookie_path")),
            timeout_seconds=_parse_timeout(values.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ConnectionParameters":
        env = os.environ if environ is None else environ
        parameters: dict[str, Any] = {}

        host = _trim_or_none(env.get("DELUGE_HOST"))
        if host:
            parameters["host"] = host
        port = _trim_or_none(env.get("DELUGE_PORT"))
        if port:
            parameters["port"] = port
        user = _trim_or_none(env.get("DELUGE_USER"))
        if user:
            parameters["user"] = user
        # Passwords are taken verbatim; surrounding whitespace may be significant.
        password = env.get("DELUGE_PASSWORD")
        if password:
            parameters["pass"] = password
        cookie_path = _trim_or_none(env.get("DELUGE_COOKIE_PATH"))
        if cookie_path:
            parameters["cookiePath"] = cookie_path
        timeout = _trim_or_none(env.get("DELUGE_TIMEOUT"))
        if timeout:
            parameters["timeout"] = timeout

        return cls.from_mapping(parameters)


def _trim_or_none(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed if trimmed else None


def _string_or_none(value: Any, key: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{key} must be a string")
    return value


def _path_or_none(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    trimmed = _trim_or_none(value)
    if trimmed is None:
        raise ConfigurationError(f"invalid cookiePath {value!r}")
    return trimmed


def _parse_port(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"invalid port {value!r}")
    if isinstance(value, int):
        port = value
    elif isinstance(value, str):
        try:
            port = int(value.strip())
        except ValueError:
            raise ConfigurationError(f"invalid port {value!r}") from None
    else:
        raise ConfigurationError(f"invalid port {value!r}")

    if not 0 < port < 65536:
        raise ConfigurationError(f"port out of range: {port}")
    return port


def _parse_timeout(value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"invalid timeout {value!r}")
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"invalid timeout {value!r}") from None
    return max(seconds, 0.0)
