from __future__ import annotations

import json

import pytest

from deluge_rpc.errors import CommandError, ResponseError
from deluge_rpc.rpc import (
    RequestIdGenerator,
    build_request,
    decode_response,
    encode_request,
    parse_response,
)


def test_encode_request_produces_exact_envelope() -> None:
    request = build_request("core.add_torrent_magnet", ["magnet:?xt=urn:btih:abc", {}], "req-1")

    body = json.loads(encode_request(request))

    assert body == {
        "jsonrpc": "2.0",
        "method": "core.add_torrent_magnet",
        "params": ["magnet:?xt=urn:btih:abc", {}],
        "id": "req-1",
    }
    assert list(body) == ["jsonrpc", "method", "params", "id"]


def test_build_request_defaults_to_empty_params() -> None:
    assert build_request("web.connected", None, "x").params == []


def test_id_generator_is_unique_and_injectable() -> None:
    generator = RequestIdGenerator(token="t", counter_start=5)
    assert [generator.next_id() for _ in range(3)] == ["t-5", "t-6", "t-7"]

    first, second = RequestIdGenerator(), RequestIdGenerator()
    ids = {first.next_id() for _ in range(100)} | {second.next_id() for _ in range(100)}
    assert len(ids) == 200


@pytest.mark.parametrize("result", [None, [], [1, 2], {"a": {"b": 1}}, "abc123", 0, False])
def test_parse_response_returns_result_verbatim(result: object) -> None:
    raw = json.dumps({"id": "r1", "result": result, "error": None}).encode()

    assert parse_response(raw, "r1") == result


def test_parse_response_rejects_id_mismatch() -> None:
    raw = json.dumps({"id": "other", "result": "abc123", "error": None})

    with pytest.raises(ResponseError, match="id mismatch"):
        parse_response(raw, "r1")


def test_parse_response_rejects_missing_id() -> None:
    with pytest.raises(ResponseError):
        parse_response(b'{"result": 1}', "r1")


def test_parse_response_checks_id_before_error() -> None:
    raw = json.dumps({"id": "other", "result": None, "error": {"message": "boom", "code": 2}})

    with pytest.raises(ResponseError):
        parse_response(raw, "r1")


def test_parse_response_raises_command_error() -> None:
    raw = json.dumps({"id": "r1", "result": None, "error": {"message": "Unknown method", "code": 2}})

    with pytest.raises(CommandError) as excinfo:
        parse_response(raw, "r1", method="core.nope")

    assert excinfo.value.message == "Unknown method"
    assert excinfo.value.code == 2
    assert excinfo.value.method == "core.nope"
    assert str(excinfo.value) == "core.nope: Unknown method (code 2)"


def test_parse_response_requires_result_or_error() -> None:
    with pytest.raises(ResponseError, match="neither result nor error"):
        parse_response(b'{"id": "r1"}', "r1")


@pytest.mark.parametrize("raw", [b"", b"not json", b"[1, 2]", b'"text"'])
def test_decode_response_rejects_malformed_bodies(raw: bytes) -> None:
    with pytest.raises(ResponseError, match="malformed"):
        decode_response(raw)


def test_decode_response_tolerates_extra_fields() -> None:
    response = decode_response(b'{"id": 3, "result": true, "jsonrpc": "2.0", "extra": 1}')

    assert response.id == 3
    assert response.result is True
    assert response.has_result
    assert not response.is_error
