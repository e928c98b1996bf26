"""JSON-RPC 2.0 envelope models exchanged with the Deluge web daemon."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class RpcRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    jsonrpc: Literal["2.0"] = "2.0"
    method: str = Field(min_length=1)
    params: list[Any] = Field(default_factory=list)
    id: str


class RpcErrorObject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str = "unknown error"
    code: int | None = None


class RpcResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | int | None = None
    result: Any = None
    error: RpcErrorObject | None = None

    @property
    def has_result(self) -> bool:
        return "result" in self.model_fields_set

    @property
    def is_error(self) -> bool:
        return self.error is not None
