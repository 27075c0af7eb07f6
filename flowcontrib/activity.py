"""Core activity types: contexts, scopes and the simple built-in activities."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable

from flowcontrib.coerce import CoercionError, to_bool, to_string

__all__ = [
    "Activity",
    "ActivityContext",
    "ActivityError",
    "ActivityHost",
    "ErrorActivity",
    "InitContext",
    "LogActivity",
    "NoopActivity",
    "Scope",
]

_LOGGER_NAME = "flowcontrib.activity"


def _default_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


class ActivityError(Exception):
    """An error raised by an activity, carrying an optional code and data."""

    def __init__(self, message: str, code: str = "", data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data

    def __str__(self) -> str:
        return self.message


class Scope:
    """A set of named values, optionally falling back to a parent scope."""

    def __init__(self, values: dict[str, Any] | None = None, parent: Scope | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})
        self.parent = parent

    def get_value(self, name: str) -> Any:
        """Return the named value; raise KeyError if no scope in the chain holds it."""
        if name in self._values:
            return self._values[name]
        if self.parent is not None:
            return self.parent.get_value(name)
        raise KeyError(name)

    def set_value(self, name: str, value: Any) -> None:
        """Set the named value in this scope."""
        self._values[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self._values or (self.parent is not None and name in self.parent)

    def to_dict(self) -> dict[str, Any]:
        """Return the values visible from this scope, nearest first."""
        merged = self.parent.to_dict() if self.parent is not None else {}
        merged.update(self._values)
        return merged


@dataclass
class ActivityHost:
    """The flow or action that runs an activity and receives its replies."""

    id: str = ""
    name: str = ""
    scope: Scope = field(default_factory=Scope)
    reply_data: dict[str, Any] | None = None
    reply_error: Exception | None = None
    return_data: dict[str, Any] | None = None
    return_error: Exception | None = None

    def reply(self, data: dict[str, Any] | None, error: Exception | None) -> None:
        """Record a reply to be sent back through the trigger."""
        self.reply_data = data
        self.reply_error = error

    def return_(self, data: dict[str, Any] | None, error: Exception | None) -> None:
        """Record the data the host returns when it finishes."""
        self.return_data = data
        self.return_error = error


@dataclass
class InitContext:
    """What an activity is given when it is created."""

    settings: dict[str, Any] = field(default_factory=dict)
    mapper_factory: Any = None
    logger: logging.Logger = field(default_factory=_default_logger)


@dataclass
class ActivityContext:
    """The inputs, outputs and host of one activity evaluation."""

    host: ActivityHost = field(default_factory=ActivityHost)
    name: str = "activity"
    inputs: dict[str, Any] = field(default_factory=dict)
    outputs: dict[str, Any] = field(default_factory=dict)
    logger: logging.Logger = field(default_factory=_default_logger)

    def get_input(self, name: str) -> Any:
        """Return the named input, or None if it is not set."""
        return self.inputs.get(name)

    def set_input(self, name: str, value: Any) -> None:
        """Set the named input."""
        self.inputs[name] = value

    def get_output(self, name: str) -> Any:
        """Return the named output, or None if it is not set."""
        return self.outputs.get(name)

    def set_output(self, name: str, value: Any) -> None:
        """Set the named output."""
        self.outputs[name] = value


class Activity(ABC):
    """A unit of work in a flow."""

    @abstractmethod
    def eval(self, ctx: ActivityContext) -> bool:
        """Run the activity; return True when it is done, raise on failure."""


class NoopActivity(Activity):
    """An activity that does nothing."""

    def eval(self, ctx: ActivityContext) -> bool:
        ctx.logger.debug("Performing No-Op Activity")
        return True


class ErrorActivity(Activity):
    """An activity that raises an explicit error from its message and data inputs."""

    def eval(self, ctx: ActivityContext) -> bool:
        message = to_string(ctx.get_input("message"))
        data = ctx.get_input("data")
        ctx.logger.debug("Message :'%s', Data: '%r'", message, data)
        raise ActivityError(message, "", data)


class LogActivity(Activity):
    """An activity that logs its message input, optionally with host details."""

    def eval(self, ctx: ActivityContext) -> bool:
        message = to_string(ctx.get_input("message"))
        try:
            add_details = to_bool(ctx.get_input("addDetails"))
        except CoercionError:
            add_details = False
        if add_details:
            message = (
                f"'{message}' - HostID [{ctx.host.id}], HostName [{ctx.host.name}], "
                f"Activity [{ctx.name}]"
            )
        ctx.logger.info(message)
        return True


ActivityFactory = Callable[[InitContext], Activity]