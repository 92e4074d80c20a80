"""Deep copies that honour fields marked to be skipped.

A dataclass field declared with ``metadata={"deepcopy": "-"}`` is not
copied: a clone gets the field's default (or None), and ``deep_copy``
leaves the destination's value in place.
"""

from __future__ import annotations

import copy
import dataclasses
from typing import Any

_IMMUTABLE = (int, float, complex, str, bytes, bool, frozenset, range, type(None))


def _skipped(f: dataclasses.Field) -> bool:
    return f.metadata.get("deepcopy") == "-"


def _field_default(f: dataclasses.Field) -> Any:
    if f.default is not dataclasses.MISSING:
        return f.default
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    return None


def _clone(value: Any, memo: dict[int, Any]) -> Any:
    if isinstance(value, _IMMUTABLE):
        return value
    ident = id(value)
    if ident in memo:
        return memo[ident]

    if isinstance(value, bytearray):
        result = bytearray(value)
        memo[ident] = result
        return result
    if isinstance(value, dict):
        result = copy.copy(value)
        result.clear()
        memo[ident] = result
        for k, v in value.items():
            result[k] = _clone(v, memo)
        return result
    if isinstance(value, (list, set)):
        result = copy.copy(value)
        result.clear()
        memo[ident] = result
        items = (_clone(v, memo) for v in value)
        if isinstance(result, list):
            result.extend(items)
        else:
            result.update(items)
        return result
    if isinstance(value, tuple):
        items = [_clone(v, memo) for v in value]
        result = type(value)(*items) if hasattr(value, "_fields") else type(value)(items)
        memo[ident] = result
        return result
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result = object.__new__(type(value))
        memo[ident] = result
        names = set()
        for f in dataclasses.fields(value):
            names.add(f.name)
            new = _field_default(f) if _skipped(f) else _clone(getattr(value, f.name), memo)
            object.__setattr__(result, f.name, new)
        for k, v in getattr(value, "__dict__", {}).items():
            if k not in names:
                object.__setattr__(result, k, _clone(v, memo))
        return result
    if hasattr(value, "__dict__") and not callable(value):
        result = object.__new__(type(value))
        memo[ident] = result
        for k, v in vars(value).items():
            result.__dict__[k] = _clone(v, memo)
        return result
    return value


def deep_clone(value: Any) -> Any:
    """Return a deep copy of ``value``."""
    return _clone(value, {})


def deep_copy(dst: Any, src: Any) -> None:
    """Overwrite the contents of ``dst`` with a deep copy of ``src``.

    Both must be of the same mutable type.
    """
    if dst is None or src is None:
        raise ValueError("deep_copy: invalid arguments")
    if type(dst) is not type(src):
        raise TypeError(f"deep_copy: {type(dst).__name__} != {type(src).__name__}")

    memo: dict[int, Any] = {}
    if isinstance(src, bytearray):
        dst[:] = src
    elif isinstance(src, dict):
        items = [(k, _clone(v, memo)) for k, v in src.items()]
        dst.clear()
        dst.update(items)
    elif isinstance(src, list):
        dst[:] = [_clone(v, memo) for v in src]
    elif isinstance(src, set):
        items = [_clone(v, memo) for v in src]
        dst.clear()
        dst.update(items)
    elif dataclasses.is_dataclass(src) and not isinstance(src, type):
        names = set()
        for f in dataclasses.fields(src):
            names.add(f.name)
            if not _skipped(f):
                object.__setattr__(dst, f.name, _clone(getattr(src, f.name), memo))
        for k, v in getattr(src, "__dict__", {}).items():
            if k not in names:
                object.__setattr__(dst, k, _clone(v, memo))
    elif hasattr(src, "__dict__") and not callable(src):
        for k, v in list(vars(src).items()):
            dst.__dict__[k] = _clone(v, memo)
    else:
        raise TypeError("deep_copy: arguments must be mutable objects")