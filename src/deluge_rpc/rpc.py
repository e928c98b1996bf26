"""Request envelope construction and response correlation."""

from __future__ import annotations

import itertools
import secrets
import threading
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from .errors import CommandError, ResponseError
from .models import RpcRequest, RpcResponse

_MAX_SAMPLE_BYTES = 200


class RequestIdGenerator:
    """Produces ids of the form ``<token>-<counter>``, unique per process run."""

    def __init__(self, *, token: str | None = None, counter_start: int = 1) -> None:
        self._token = token if token is not None else secrets.token_hex(6)
        self._counter = itertools.count(counter_start)
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            value = next(self._counter)
        return f"{self._token}-{value}"


def build_request(method: str, params: Sequence[Any] | None, request_id: str) -> RpcRequest:
    return RpcRequest(method=method, params=list(params or ()), id=request_id)


def encode_request(request: RpcRequest) -> bytes:
    return request.model_dump_json().encode("utf-8")


def decode_response(raw: bytes | str) -> RpcResponse:
    try:
        return RpcResponse.model_validate_json(raw)
    except ValidationError as error:
        raise ResponseError(f"malformed JSON-RPC response: {_sample(raw)}") from error


def parse_response(raw: bytes | str, expected_id: str, *, method: str | None = None) -> Any:
    response = decode_response(raw)

    if response.id is None or str(response.id) != expected_id:
        raise ResponseError(
            f"JSON-RPC request/response id mismatch: expected {expected_id!r}, got {response.id!r}"
        )

    if response.error is not None:
        raise CommandError(response.error.message, code=response.error.code, method=method)

    if not response.has_result:
        raise ResponseError(f"JSON-RPC response {expected_id!r} carries neither result nor error")

    return response.result


def _sample(raw: bytes | str) -> str:
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    return text if len(text) <= _MAX_SAMPLE_BYTES else f"{text[:_MAX_SAMPLE_BYTES]}..."
