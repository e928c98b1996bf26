"""Call hook registry for the Deluge client."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .protocols import HookMiddleware


@dataclass(slots=True)
class RpcCall:
    method: str
    params: list[Any]
    request_id: str


BeforeHook = Callable[[RpcCall], None]
AfterHook = Callable[[RpcCall, Any], None]
ErrorHook = Callable[[RpcCall, Exception], None]


@dataclass(slots=True)
class HookRegistry:
    _before: dict[str, list[BeforeHook]] = field(default_factory=dict)
    _after: dict[str, list[AfterHook]] = field(default_factory=dict)
    _error: dict[str, list[ErrorHook]] = field(default_factory=dict)

    def add_before(self, method: str, hook: BeforeHook) -> None:
        self._before.setdefault(method, []).append(hook)

    def add_after(self, method: str, hook: AfterHook) -> None:
        self._after.setdefault(method, []).append(hook)

    def add_error(self, method: str, hook: ErrorHook) -> None:
        self._error.setdefault(method, []).append(hook)

    def add_middleware(self, method: str, middleware: HookMiddleware) -> None:
        self.add_before(method, _require_hook_callable(middleware, "before"))
        self.add_after(method, _require_hook_callable(middleware, "after"))
        self.add_error(method, _require_hook_callable(middleware, "on_error"))

    def run_before(self, call: RpcCall) -> None:
        for hook in self._match(self._before, call.method):
            hook(call)

    def run_after(self, call: RpcCall, result: Any) -> None:
        for hook in self._match(self._after, call.method):
            hook(call, result)

    def run_error(self, call: RpcCall, error: Exception) -> None:
        for hook in self._match(self._error, call.method):
            hook(call, error)

    @staticmethod
    def _match(registry: dict[str, list[Any]], method: str) -> list[Any]:
        # "*" matches everything; "core.*" matches every method under core.
        matched = list(registry.get("*", []))
        for pattern, hooks in registry.items():
            if pattern.endswith(".*") and method.startswith(pattern[:-1]):
                matched.extend(hooks)
        matched.extend(registry.get(method, []))
        return matched


def _require_hook_callable(middleware: object, name: str) -> Callable[..., Any]:
    hook = getattr(middleware, name, None)
    if not callable(hook):
        raise TypeError(f"hook middleware must provide callable {name}()")
    return hook
