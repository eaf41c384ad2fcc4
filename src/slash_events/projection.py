"""Flatten event payloads into dotted script variables.

``{"a": 1, "b": [10, 20]}`` projected under ``arg1`` binds ``arg1.a``,
``arg1.b.0`` and ``arg1.b.1``. Mappings contribute their keys as path
segments, sequences their positions.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Iterable, Iterator, Tuple

from .scope import Scope


class ValueKind(Enum):
    NULL = "null"
    SCALAR = "scalar"
    KEYED = "keyed"
    ORDERED = "ordered"


def classify(value: Any) -> ValueKind:
    """Return which projection rule applies to ``value``."""

    if value is None:
        return ValueKind.NULL
    if isinstance(value, Mapping):
        return ValueKind.KEYED
    if isinstance(value, (str, bytes, bytearray)):
        return ValueKind.SCALAR
    if isinstance(value, (Sequence, set, frozenset)):
        return ValueKind.ORDERED
    return ValueKind.SCALAR


def is_collection(value: Any) -> bool:
    return classify(value) in (ValueKind.KEYED, ValueKind.ORDERED)


def to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _json_default(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    if isinstance(value, (bytes, bytearray)):
        return to_text(value)
    return str(value)


def collection_text(value: Any) -> str:
    """Render a whole collection as JSON text."""

    return json.dumps(value, ensure_ascii=False, default=_json_default)


def _children(value: Any, kind: ValueKind) -> Iterator[Tuple[str, Any]]:
    if kind is ValueKind.KEYED:
        for key, item in value.items():
            yield str(key), item
    else:
        if isinstance(value, (set, frozenset)):
            value = sorted(value, key=repr)
        for index, item in enumerate(value):
            yield str(index), item


def flatten(value: Any, prefix: str) -> Iterator[Tuple[str, Any]]:
    """Yield ``(path, scalar)`` pairs for every leaf of ``value``.

    Uses an explicit stack, so nesting depth is not limited by the
    interpreter's recursion limit.
    """

    stack = [(prefix, value)]
    while stack:
        path, current = stack.pop()
        kind = classify(current)
        if kind is ValueKind.NULL:
            continue
        if kind is ValueKind.SCALAR:
            yield path, current
            continue
        children = [(f"{path}.{key}", item) for key, item in _children(current, kind)]
        stack.extend(reversed(children))


def project(scope: Scope, value: Any, prefix: str, stringify: bool = False) -> None:
    """Bind every leaf of ``value`` into ``scope`` under ``prefix``."""

    for path, leaf in flatten(value, prefix):
        scope.let_variable(path, to_text(leaf) if stringify else leaf)


def project_arguments(scope: Scope, args: Iterable[Any], stringify: bool = False) -> None:
    """Expose positional event arguments as ``arg0``, ``arg1``, ...

    Each collection argument is also bound whole under ``argN`` before its
    members are projected; with ``stringify`` that binding is JSON text.
    """

    for index, arg in enumerate(args):
        if arg is None:
            continue
        name = f"arg{index}"
        if is_collection(arg):
            scope.let_variable(name, collection_text(arg) if stringify else arg)
        project(scope, arg, name, stringify=stringify)
