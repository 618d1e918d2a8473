"""Stages and the YAML stage-file loader.

A stage file is a multi-document YAML stream. Each document describes one
stage; its name is taken from ``project.stage`` and a document without one is
the ``default`` stage. Nested mappings are flattened into dot-delimited keys
with string values::

    logger:
      level: INFO
    ---
    project:
      stage: production
    logger:
      level: WARN
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import yaml

from stageconf.errors import ConfigNotFoundError, StageFileInvalidError, StageNotFoundError
from stageconf.utils.keys import flatten

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_STAGE",
    "STAGE_PROPERTY",
    "Stage",
    "ProjectStage",
    "parse_stages",
    "load_stages",
    "select_stage",
]

DEFAULT_STAGE = "default"
STAGE_PROPERTY = "project.stage"


@runtime_checkable
class Stage(Protocol):
    """A named set of string configuration properties."""

    @property
    def name(self) -> str: ...

    @property
    def properties(self) -> Mapping[str, str]: ...


@dataclass(frozen=True)
class ProjectStage:
    """Stage backed by an in-memory mapping."""

    name: str
    properties: Mapping[str, str] = field(default_factory=dict)

    def get_name(self) -> str:
        return self.name

    def get_properties(self) -> Mapping[str, str]:
        return self.properties


def parse_stages(text: str, source: str = "<string>") -> dict[str, ProjectStage]:
    """Parse a multi-document YAML stream into stages keyed by name.

    Empty documents are skipped.

    Raises:
        StageFileInvalidError: On invalid YAML, a document that is not a
            mapping, or two documents declaring the same stage.
    """
    try:
        documents = list(yaml.safe_load_all(text))
    except yaml.YAMLError as e:
        raise StageFileInvalidError(source=source, reason=f"invalid YAML: {e}", cause=e) from e

    stages: dict[str, ProjectStage] = {}
    for index, document in enumerate(documents):
        if document is None:
            logger.warning("Skipping empty document %d in stage file %s", index, source)
            continue
        if not isinstance(document, dict):
            raise StageFileInvalidError(
                source=source,
                reason=f"document {index} must be a mapping, got {type(document).__name__}",
            )

        properties = flatten(document)
        name = properties.get(STAGE_PROPERTY, DEFAULT_STAGE)
        if name in stages:
            raise StageFileInvalidError(source=source, reason=f"duplicate stage '{name}'")
        stages[name] = ProjectStage(name=name, properties=properties)
        logger.debug("Loaded stage '%s' with %d properties from %s", name, len(properties), source)

    return stages


def load_stages(path: str | os.PathLike[str]) -> dict[str, ProjectStage]:
    """Load all stages from a YAML stage file.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        StageFileInvalidError: If the file cannot be read or parsed.
    """
    file_path = os.fspath(path)
    if not os.path.isfile(file_path):
        raise ConfigNotFoundError(config_path=file_path)

    try:
        with open(file_path, encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise StageFileInvalidError(source=file_path, reason=str(e), cause=e) from e

    return parse_stages(text, source=file_path)


def select_stage(
    stages: Mapping[str, ProjectStage],
    name: str | None = None,
    system_properties: Mapping[str, str] | None = None,
) -> ProjectStage:
    """Pick the active stage, layered over the ``default`` stage.

    The stage name comes from ``name``, else from the ``project.stage``
    entry of ``system_properties`` (``os.environ`` when omitted), else
    ``default``. Properties of the selected stage override those of the
    ``default`` stage.

    Raises:
        StageNotFoundError: If the resolved name is not among ``stages``.
    """
    if system_properties is None:
        system_properties = os.environ
    stage_name = name or system_properties.get(STAGE_PROPERTY) or DEFAULT_STAGE

    if stage_name not in stages:
        if stage_name == DEFAULT_STAGE:
            logger.debug("No stages defined, using an empty default stage")
            return ProjectStage(name=DEFAULT_STAGE)
        raise StageNotFoundError(stage_name, available=sorted(stages))

    selected = stages[stage_name]
    base = stages.get(DEFAULT_STAGE)
    if base is None or base is selected:
        logger.debug("Selected stage '%s'", stage_name)
        return selected

    merged: dict[str, str] = {**base.properties, **selected.properties}
    logger.debug("Selected stage '%s' layered over '%s'", stage_name, DEFAULT_STAGE)
    return ProjectStage(name=stage_name, properties=merged)
