from __future__ import annotations

from pathlib import Path

import pytest

from deluge_rpc.config import ConnectionParameters
from deluge_rpc.errors import ConfigurationError


def test_from_mapping_applies_defaults() -> None:
    params = ConnectionParameters.from_mapping({})

    assert params.host == "localhost"
    assert params.port == 8181
    assert params.user is None
    assert params.password is None
    assert params.cookie_path is None
    assert params.timeout_seconds == 15.0
    assert params.url == "http://localhost:8181/json"


def test_from_mapping_reads_known_keys_and_drops_unknown(tmp_path: Path) -> None:
    cookie_path = tmp_path / "deluge.cookies"
    params = ConnectionParameters.from_mapping(
        {
            "host": "seedbox.local",
            "port": "8112",
            "user": "admin",
            "pass": "deluge",
            "cookiePath": str(cookie_path),
            "timeout": -4,
            "verbose": True,
        }
    )

    assert params == ConnectionParameters(
        host="seedbox.local",
        port=8112,
        user="admin",
        password="deluge",
        cookie_path=str(cookie_path),
        timeout_seconds=0.0,
    )
    assert not hasattr(params, "verbose")


def test_from_mapping_accepts_path_objects(tmp_path: Path) -> None:
    params = ConnectionParameters.from_mapping({"cookie_path": tmp_path / "jar.txt"})

    assert params.cookie_path == str(tmp_path / "jar.txt")


@pytest.mark.parametrize("value", [None, "localhost:8181", ["host"], 8181])
def test_from_mapping_rejects_non_mappings(value: object) -> None:
    with pytest.raises(ConfigurationError):
        ConnectionParameters.from_mapping(value)


@pytest.mark.parametrize(
    "parameters",
    [{"port": "http"}, {"port": 0}, {"port": 70000}, {"port": True}, {"host": ""}, {"host": 1}, {"pass": 1234}],
)
def test_from_mapping_rejects_invalid_values(parameters: dict[str, object]) -> None:
    with pytest.raises(ConfigurationError):
        ConnectionParameters.from_mapping(parameters)


def test_parameters_are_immutable() -> None:
    params = ConnectionParameters()

    with pytest.raises(AttributeError):
        params.host = "elsewhere"  # type: ignore[misc]


def test_from_env_reads_deluge_variables() -> None:
    params = ConnectionParameters.from_env(
        {
            "DELUGE_HOST": " nas ",
            "DELUGE_PORT": "8112",
            "DELUGE_PASSWORD": " secret ",
            "DELUGE_COOKIE_PATH": "/tmp/deluge.cookies",
            "DELUGE_TIMEOUT": "2.5",
        }
    )

    assert params.host == "nas"
    assert params.port == 8112
    assert params.password == " secret "
    assert params.cookie_path == "/tmp/deluge.cookies"
    assert params.timeout_seconds == 2.5


def test_from_env_falls_back_to_defaults() -> None:
    assert ConnectionParameters.from_env({}) == ConnectionParameters()
