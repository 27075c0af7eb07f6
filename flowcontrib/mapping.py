"""Mappers and the activities that apply them to a host's scope."""

from __future__ import annotations

import copy
import re
from typing import Any, Callable

from flowcontrib.activity import Activity, ActivityContext, ActivityError, InitContext, Scope
from flowcontrib.coerce import to_object
from flowcontrib.jsonpath import path

__all__ = [
    "Mapper",
    "MapperActivity",
    "MapperFactory",
    "ReplyActivity",
    "ReturnActivity",
]

_RESOLVER = re.compile(r"\$\.?([A-Za-z_][\w-]*)(.*)", re.DOTALL)


def _resolver(expression: str) -> Callable[[Scope], Any]:
    match = _RESOLVER.fullmatch(expression.strip())
    if match is None:
        raise ValueError(f"unsupported mapping expression '{expression}'")
    name, rest = match[1], match[2].strip()

    def resolve(scope: Scope) -> Any:
        try:
            value = scope.get_value(name)
        except KeyError:
            raise ValueError(f"unable to resolve '{name}' in scope") from None
        return path("$" + rest, value) if rest else value

    return resolve


def _literal(value: Any) -> Callable[[Scope], Any]:
    return lambda scope: copy.deepcopy(value)


class Mapper:
    """Computes named values from literals and `=$.name` expressions."""

    def __init__(self, mappings: dict[str, Any]) -> None:
        self._rules: dict[str, Callable[[Scope], Any]] = {}
        for name, value in mappings.items():
            if isinstance(value, str) and value.startswith("="):
                self._rules[name] = _resolver(value[1:])
            else:
                self._rules[name] = _literal(value)

    def apply(self, scope: Scope) -> dict[str, Any]:
        """Evaluate every mapping against the scope."""
        return {name: rule(scope) for name, rule in self._rules.items()}


class MapperFactory:
    """Builds mappers; empty mappings yield no mapper."""

    def new_mapper(self, mappings: dict[str, Any] | None) -> Mapper | None:
        if not mappings:
            return None
        if not isinstance(mappings, dict):
            raise TypeError("mappings must be a mapping of names to values")
        return Mapper(mappings)


def _build_mapper(ctx: InitContext, required: bool) -> Mapper | None:
    mappings = ctx.settings.get("mappings")
    if mappings is None and required:
        raise ValueError("required setting 'mappings' not set")
    mappings = to_object(mappings)
    ctx.logger.debug("Mappings: %r", mappings)
    factory = ctx.mapper_factory or MapperFactory()
    return factory.new_mapper(mappings)


def _apply(mapper: Mapper, scope: Scope) -> dict[str, Any]:
    try:
        return mapper.apply(scope)
    except (ValueError, LookupError) as exc:
        raise ActivityError(str(exc)) from exc


class ReplyActivity(Activity):
    """Replies through the trigger with mapped values from the host scope."""

    def __init__(self, mapper: Mapper | None = None) -> None:
        self.mapper = mapper

    @classmethod
    def from_context(cls, ctx: InitContext) -> ReplyActivity:
        return cls(_build_mapper(ctx, required=True))

    def eval(self, ctx: ActivityContext) -> bool:
        host = ctx.host
        if self.mapper is None:
            host.reply(None, None)
            return True
        host.reply(_apply(self.mapper, host.scope), None)
        return True


class ReturnActivity(Activity):
    """Returns mapped values from the host scope as the host's result."""

    def __init__(self, mapper: Mapper | None = None) -> None:
        self.mapper = mapper

    @classmethod
    def from_context(cls, ctx: InitContext) -> ReturnActivity:
        return cls(_build_mapper(ctx, required=False))

    def eval(self, ctx: ActivityContext) -> bool:
        host = ctx.host
        if self.mapper is None:
            host.return_(None, None)
            return True
        host.return_(_apply(self.mapper, host.scope), None)
        return True


class MapperActivity(Activity):
    """Writes mapped values back into the host scope."""

    def __init__(self, mapper: Mapper | None = None) -> None:
        self.mapper = mapper

    @classmethod
    def from_context(cls, ctx: InitContext) -> MapperActivity:
        return cls(_build_mapper(ctx, required=True))

    def eval(self, ctx: ActivityContext) -> bool:
        if self.mapper is None:
            return True
        scope = ctx.host.scope
        for name, value in _apply(self.mapper, scope).items():
            scope.set_value(name, value)
        return True