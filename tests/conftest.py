"""Shared test fixtures for the stageconf test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from stageconf.config import StageConfig
from stageconf.stage import ProjectStage


STAGE_FILE = """\
logger:
  level: INFO
http:
  port: 8080
  secure: false
---
project:
  stage: production
logger:
  level: WARN
http:
  secure: true
  hosts: [a.example.com, b.example.com]
"""


@pytest.fixture
def stage() -> ProjectStage:
    """A stage with a small nested namespace."""
    return ProjectStage(
        name="development",
        properties={
            "a.b.c": "1",
            "a.d": "2",
            "http.port": "8080",
            "feature.enabled": "true",
            "shared": "from-stage",
        },
    )


@pytest.fixture
def system_properties() -> dict[str, str]:
    """Fallback properties used in place of the process environment."""
    return {
        "shared": "from-properties",
        "only.in.properties": "fallback",
        "a.e.f": "3",
    }


@pytest.fixture
def config(stage: ProjectStage, system_properties: dict[str, str]) -> StageConfig:
    """StageConfig over the fixture stage and fallback properties."""
    return StageConfig(stage, system_properties=system_properties)


@pytest.fixture
def stage_file(tmp_path: Path) -> Path:
    """Write a two-stage YAML file and return its path."""
    path = tmp_path / "project-stages.yml"
    path.write_text(STAGE_FILE)
    return path
