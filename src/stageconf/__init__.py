"""stageconf - Staged configuration resolution."""

from __future__ import annotations

# Core
from stageconf.config import StageConfig
from stageconf.resolver import Resolver

# Conversion
from stageconf.conversion import Converter, TargetType

# Stages
from stageconf.stage import (
    DEFAULT_STAGE,
    STAGE_PROPERTY,
    ProjectStage,
    Stage,
    load_stages,
    parse_stages,
    select_stage,
)

# Errors
from stageconf.errors import (
    ConfigError,
    ConfigNotFoundError,
    ConversionError,
    ErrorCodes,
    MissingConfigurationError,
    StageConfigError,
    StageFileInvalidError,
    StageNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "StageConfig",
    "Resolver",
    # Conversion
    "TargetType",
    "Converter",
    # Stages
    "Stage",
    "ProjectStage",
    "DEFAULT_STAGE",
    "STAGE_PROPERTY",
    "load_stages",
    "parse_stages",
    "select_stage",
    # Errors
    "ErrorCodes",
    "StageConfigError",
    "MissingConfigurationError",
    "ConversionError",
    "ConfigError",
    "ConfigNotFoundError",
    "StageFileInvalidError",
    "StageNotFoundError",
]
