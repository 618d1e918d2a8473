"""Per-key resolution with stage/property precedence and type conversion."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

from pydantic import AnyUrl

from stageconf.conversion import Converter, TargetType, convert
from stageconf.errors import ConfigError, ConversionError, MissingConfigurationError
from stageconf.stage import Stage

logger = logging.getLogger(__name__)

__all__ = ["Resolver"]

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class Resolver(Generic[T]):
    """Immutable lookup descriptor for a single configuration key.

    Every configuration step returns a new resolver, so a resolver can be
    reused and shared freely::

        port = config.resolve("http.port").with_default("8080").as_type(int)
        port.get_value()

    Lookup order is the stage properties, then the fallback properties,
    then the default. Values are re-read on every call.
    """

    key: str
    stage: Stage
    system_properties: Mapping[str, str]
    target: TargetType = TargetType.STRING
    default: Any = None
    converter: Converter | None = None
    url_type: type[AnyUrl] = AnyUrl

    def as_type(self, target: TargetType | type, converter: Converter | None = None) -> Resolver[Any]:
        """Return a resolver for the same key bound to another target type.

        With a ``converter`` any target is accepted and the converter
        replaces the built-in coercion. A URL class such as ``HttpUrl`` is
        kept and used for validation.

        Raises:
            ConfigError: If ``target`` has no built-in conversion and no
                converter is given.
        """
        if converter is not None:
            if not callable(converter):
                raise ConfigError(f"Converter for '{self.key}' is not callable")
            tag = target if isinstance(target, TargetType) else TargetType.CUSTOM
            return replace(self, target=tag, converter=converter)
        tag = TargetType.of(target)
        if tag is TargetType.CUSTOM:
            raise ConfigError(f"Custom target for '{self.key}' requires a converter")
        url_type = target if tag is TargetType.URL and isinstance(target, type) else AnyUrl
        return replace(self, target=tag, converter=None, url_type=url_type)

    def with_default(self, value: T) -> Resolver[T]:
        """Return a resolver that falls back to ``value`` when no raw value exists."""
        return replace(self, default=value)

    def get_key(self) -> str:
        return self.key

    def _raw_value(self) -> tuple[str | None, str]:
        value = self.stage.properties.get(self.key)
        if value is not None:
            return value, "stage"
        value = self.system_properties.get(self.key)
        if value is not None:
            return value, "properties"
        return None, "none"

    def has_value(self) -> bool:
        """Check whether the stage or the fallback properties define the key.

        The default value is not considered.
        """
        value, _ = self._raw_value()
        return value is not None

    def get_value(self) -> T:
        """Resolve and convert the value for this key.

        A string default is converted like a raw value. Any other default
        is returned unchanged.

        Raises:
            MissingConfigurationError: If there is no raw value and no default,
                or the converter produced ``None``.
            ConversionError: If conversion of the raw value fails.
        """
        raw, source = self._raw_value()
        if raw is None:
            if self.default is None:
                raise MissingConfigurationError(self.key)
            if not isinstance(self.default, str):
                logger.debug("Config '%s' resolved from non-string default", self.key)
                return self.default
            raw, source = self.default, "default"

        logger.debug("Config '%s' resolved from %s as %s", self.key, source, self.target.value)
        try:
            result = convert(raw, self.target, self.converter, self.url_type)
        except Exception as e:
            raise ConversionError(self.key, self.target.value, raw, cause=e) from e

        if result is None:
            raise MissingConfigurationError(self.key)
        return result
