"""Application-wide shared values and named counters, with their activities."""

from __future__ import annotations

import threading
from typing import Any, Callable

from flowcontrib.activity import Activity, ActivityContext, InitContext
from flowcontrib.coerce import DataType, to_string, to_type, to_type_enum

__all__ = [
    "AppDataActivity",
    "Counter",
    "CounterActivity",
    "get_app_value",
    "get_counter",
    "set_app_value",
]

_app_values: dict[str, Any] = {}
_app_lock = threading.Lock()

_counters: dict[str, Counter] = {}
_counters_lock = threading.Lock()


def get_app_value(name: str) -> Any:
    """Return the shared value with this name, or None if it is not set."""
    with _app_lock:
        return _app_values.get(name)


def set_app_value(name: str, value: Any) -> None:
    """Set the shared value with this name."""
    with _app_lock:
        _app_values[name] = value


def _lookup_app_value(name: str) -> tuple[Any, bool]:
    with _app_lock:
        return _app_values.get(name), name in _app_values


class Counter:
    """A thread-safe, non-negative counter."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def get(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def reset(self) -> int:
        with self._lock:
            self._value = 0
            return 0


def get_counter(name: str) -> Counter:
    """Return the counter with this name, creating it at zero if needed."""
    with _counters_lock:
        counter = _counters.get(name)
        if counter is None:
            counter = _counters[name] = Counter()
        return counter


def _required(settings: dict[str, Any], key: str) -> str:
    value = settings.get(key)
    if value is None or value == "":
        raise ValueError(f"required setting '{key}' not set")
    return to_string(value)


def _allowed(settings: dict[str, Any], key: str, allowed: tuple[str, ...], default: str) -> str:
    value = to_string(settings.get(key)) or default
    if value not in allowed:
        raise ValueError(f"value '{value}' not allowed for setting '{key}', must be one of {allowed}")
    return value


class CounterActivity(Activity):
    """Gets, increments or resets a named counter and outputs its value."""

    def __init__(self, operation: Callable[[], int]) -> None:
        self._operation = operation

    @classmethod
    def from_context(cls, ctx: InitContext) -> CounterActivity:
        name = _required(ctx.settings, "counterName")
        op = _allowed(ctx.settings, "op", ("get", "increment", "reset"), "get")
        counter = get_counter(name)
        operations = {"get": counter.get, "increment": counter.increment, "reset": counter.reset}
        return cls(operations[op])

    def eval(self, ctx: ActivityContext) -> bool:
        ctx.set_output("value", self._operation())
        return True


class AppDataActivity(Activity):
    """Gets or sets a shared application value, optionally coercing its type."""

    def __init__(self, name: str, op: str = "get", data_type: DataType = DataType.UNKNOWN) -> None:
        self.name = name
        self.op = op
        self.data_type = data_type

    @classmethod
    def from_context(cls, ctx: InitContext) -> AppDataActivity:
        name = _required(ctx.settings, "name")
        op = _allowed(ctx.settings, "op", ("get", "set"), "get")
        type_name = to_string(ctx.settings.get("type"))
        data_type = to_type_enum(type_name) if type_name else DataType.UNKNOWN
        return cls(name, op, data_type)

    def _coerce(self, value: Any) -> Any:
        return to_type(value, self.data_type) if self.data_type > DataType.ANY else value

    def eval(self, ctx: ActivityContext) -> bool:
        if self.op == "set":
            set_app_value(self.name, self._coerce(ctx.get_input("value")))
            return True
        value, exists = _lookup_app_value(self.name)
        if exists:
            value = self._coerce(value)
        ctx.set_output("value", value)
        return True