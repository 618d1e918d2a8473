"""Target type tags and built-in string coercion."""

from __future__ import annotations

import math
import re
import struct
from enum import Enum
from functools import lru_cache
from typing import Any, Callable

from pydantic import AnyUrl, TypeAdapter

from stageconf.errors import ConfigError

__all__ = ["TargetType", "Converter", "convert"]

Converter = Callable[[str], Any]

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)[fFdD]?"
)

_INT32_RANGE = (-(2**31), 2**31 - 1)
_INT64_RANGE = (-(2**63), 2**63 - 1)


@lru_cache(maxsize=None)
def _url_adapter(url_type: type[AnyUrl]) -> TypeAdapter[AnyUrl]:
    return TypeAdapter(url_type)


class TargetType(str, Enum):
    """Closed set of conversion targets a resolver can be bound to."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    URL = "url"
    CUSTOM = "custom"

    @classmethod
    def of(cls, target: TargetType | type) -> TargetType:
        """Map a tag or a Python type to its tag.

        ``int`` maps to LONG and ``float`` to DOUBLE. Any ``AnyUrl`` subclass
        maps to URL.

        Raises:
            ConfigError: If no built-in conversion exists for ``target``.
        """
        if isinstance(target, TargetType):
            return target
        if target is str:
            return cls.STRING
        if target is bool:
            return cls.BOOLEAN
        if target is int:
            return cls.LONG
        if target is float:
            return cls.DOUBLE
        if isinstance(target, type) and issubclass(target, AnyUrl):
            return cls.URL
        name = getattr(target, "__name__", repr(target))
        raise ConfigError(
            f"No built-in conversion to '{name}'; pass a converter to as_type()"
        )


def _parse_bool(value: str) -> bool:
    return value.lower() == "true" or value == "1"


def _parse_integer(value: str, bounds: tuple[int, int]) -> int:
    if not _INTEGER_RE.fullmatch(value):
        raise ValueError(f"For input string: {value!r}")
    result = int(value)
    low, high = bounds
    if not low <= result <= high:
        raise ValueError(f"Value out of range [{low}, {high}]: {value!r}")
    return result


def _parse_double(value: str) -> float:
    text = value.strip()
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(f"For input string: {value!r}")
    text = text.rstrip("fFdD")
    return float(text.replace("Infinity", "inf"))


def _parse_float(value: str) -> float:
    result = _parse_double(value)
    try:
        return struct.unpack("f", struct.pack("f", result))[0]
    except OverflowError:
        return math.copysign(math.inf, result)


def _parse_url(value: str, url_type: type[AnyUrl] = AnyUrl) -> AnyUrl:
    return _url_adapter(url_type).validate_python(value)


_BUILTIN: dict[TargetType, Callable[[str], Any]] = {
    TargetType.STRING: lambda value: value,
    TargetType.BOOLEAN: _parse_bool,
    TargetType.INTEGER: lambda value: _parse_integer(value, _INT32_RANGE),
    TargetType.LONG: lambda value: _parse_integer(value, _INT64_RANGE),
    TargetType.FLOAT: _parse_float,
    TargetType.DOUBLE: _parse_double,
}


def convert(
    value: str,
    target: TargetType,
    converter: Converter | None = None,
    url_type: type[AnyUrl] = AnyUrl,
) -> Any:
    """Convert a raw configuration string to ``target``.

    A custom ``converter`` takes precedence over the built-in coercion.
    URL values are validated against ``url_type``, so constrained classes
    such as ``HttpUrl`` keep their rules.
    Parse failures propagate as raised by the parser (``ValueError``,
    pydantic ``ValidationError``, or whatever the converter raises).

    Raises:
        ConfigError: If ``target`` is CUSTOM and no converter was given.
    """
    if converter is not None:
        return converter(value)
    if target is TargetType.URL:
        return _parse_url(value, url_type)
    parser = _BUILTIN.get(target)
    if parser is None:
        raise ConfigError(f"Target type '{target.value}' requires a converter")
    return parser(value)
