"""Stage-bound facade resolving keys against a stage with fallback properties."""

from __future__ import annotations

import os
from collections.abc import Mapping

from stageconf.resolver import Resolver
from stageconf.stage import Stage
from stageconf.utils import keys as key_utils

__all__ = ["StageConfig"]


class StageConfig:
    """Configuration accessor bound to one stage.

    Values are looked up in the stage first and then in ``system_properties``,
    which defaults to ``os.environ``. Neither mapping is modified.
    """

    def __init__(self, stage: Stage, system_properties: Mapping[str, str] | None = None) -> None:
        self._stage = stage
        self._system_properties: Mapping[str, str] = (
            system_properties if system_properties is not None else os.environ
        )

    @property
    def name(self) -> str:
        """Name of the bound stage."""
        return self._stage.name

    def get_name(self) -> str:
        return self._stage.name

    def resolve(self, key: str) -> Resolver[str]:
        """Create a string resolver for ``key``."""
        return Resolver(key=key, stage=self._stage, system_properties=self._system_properties)

    def keys(self) -> set[str]:
        """All keys defined in the stage."""
        return set(self._stage.properties.keys())

    def _all_keys(self) -> set[str]:
        return {str(k) for k in self._system_properties.keys()} | self.keys()

    def simple_subkeys(self, prefix: str) -> set[str]:
        """Names one level below ``prefix`` across the stage and system properties."""
        return key_utils.simple_subkeys(self._all_keys(), prefix)

    def has_key_or_subkeys(self, key: str) -> bool:
        """Check whether ``key`` or any ``key.*`` is defined."""
        return key_utils.has_key_or_subkeys(self._all_keys(), key)
