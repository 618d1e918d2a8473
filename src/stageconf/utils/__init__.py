"""Key helpers for stageconf."""

from __future__ import annotations

from stageconf.utils.keys import flatten, has_key_or_subkeys, simple_subkeys

__all__ = ["flatten", "has_key_or_subkeys", "simple_subkeys"]
