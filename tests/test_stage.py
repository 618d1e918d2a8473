"""Tests for stage-file loading and stage selection."""

from __future__ import annotations

from pathlib import Path

import pytest

from stageconf.config import StageConfig
from stageconf.errors import ConfigNotFoundError, StageFileInvalidError, StageNotFoundError
from stageconf.stage import DEFAULT_STAGE, ProjectStage, Stage, load_stages, parse_stages, select_stage


# === ProjectStage ===


class TestProjectStage:
    def test_accessors(self) -> None:
        stage = ProjectStage(name="qa", properties={"k": "v"})
        assert stage.get_name() == "qa"
        assert stage.get_properties() == {"k": "v"}

    def test_satisfies_stage_protocol(self) -> None:
        assert isinstance(ProjectStage(name="qa"), Stage)

    def test_empty_by_default(self) -> None:
        assert ProjectStage(name="qa").properties == {}


# === parse_stages() ===


class TestParseStages:
    def test_single_document_is_default_stage(self) -> None:
        stages = parse_stages("http:\n  port: 8080\n")
        assert list(stages) == [DEFAULT_STAGE]
        assert stages[DEFAULT_STAGE].properties == {"http.port": "8080"}

    def test_named_stages(self, stage_file: Path) -> None:
        stages = parse_stages(stage_file.read_text())
        assert set(stages) == {"default", "production"}
        production = stages["production"].properties
        assert production["project.stage"] == "production"
        assert production["logger.level"] == "WARN"
        assert production["http.secure"] == "true"
        assert production["http.hosts"] == "a.example.com,b.example.com"

    def test_scalars_are_stringified(self) -> None:
        stages = parse_stages("a:\n  flag: false\n  ratio: 0.5\n  empty: null\n")
        assert stages[DEFAULT_STAGE].properties == {"a.flag": "false", "a.ratio": "0.5"}

    def test_empty_documents_are_skipped(self) -> None:
        stages = parse_stages("a: 1\n---\n")
        assert set(stages) == {DEFAULT_STAGE}

    def test_invalid_yaml_raises(self) -> None:
        with pytest.raises(StageFileInvalidError) as exc_info:
            parse_stages("{{invalid yaml:", source="broken.yml")
        assert exc_info.value.details["source"] == "broken.yml"
        assert exc_info.value.cause is not None

    def test_non_mapping_document_raises(self) -> None:
        with pytest.raises(StageFileInvalidError, match="must be a mapping"):
            parse_stages("- a\n- b\n")

    def test_duplicate_stage_raises(self) -> None:
        text = "project:\n  stage: qa\n---\nproject:\n  stage: qa\n"
        with pytest.raises(StageFileInvalidError, match="duplicate stage 'qa'"):
            parse_stages(text)


# === load_stages() ===


class TestLoadStages:
    def test_loads_file(self, stage_file: Path) -> None:
        stages = load_stages(stage_file)
        assert stages["default"].properties["http.port"] == "8080"

    def test_accepts_str_path(self, stage_file: Path) -> None:
        assert set(load_stages(str(stage_file))) == {"default", "production"}

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError):
            load_stages(tmp_path / "nope.yml")


# === select_stage() ===


class TestSelectStage:
    def test_named_stage_layers_over_default(self, stage_file: Path) -> None:
        stage = select_stage(load_stages(stage_file), "production", system_properties={})
        assert stage.name == "production"
        assert stage.properties["logger.level"] == "WARN"
        assert stage.properties["http.port"] == "8080"
        assert stage.properties["http.secure"] == "true"

    def test_name_from_system_properties(self, stage_file: Path) -> None:
        stage = select_stage(load_stages(stage_file), system_properties={"project.stage": "production"})
        assert stage.name == "production"

    def test_name_from_environment(self, stage_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("project.stage", "production")
        assert select_stage(load_stages(stage_file)).name == "production"

    def test_default_when_unnamed(self, stage_file: Path) -> None:
        stage = select_stage(load_stages(stage_file), system_properties={})
        assert stage.name == DEFAULT_STAGE
        assert stage.properties["logger.level"] == "INFO"

    def test_explicit_name_beats_system_properties(self, stage_file: Path) -> None:
        stage = select_stage(load_stages(stage_file), "default", system_properties={"project.stage": "production"})
        assert stage.name == DEFAULT_STAGE

    def test_unknown_stage_raises(self, stage_file: Path) -> None:
        with pytest.raises(StageNotFoundError) as exc_info:
            select_stage(load_stages(stage_file), "qa", system_properties={})
        assert exc_info.value.details["available"] == ["default", "production"]

    def test_no_stages_gives_empty_default(self) -> None:
        stage = select_stage({}, system_properties={})
        assert stage.name == DEFAULT_STAGE
        assert stage.properties == {}

    def test_selected_stage_feeds_stage_config(self, stage_file: Path) -> None:
        stage = select_stage(load_stages(stage_file), "production", system_properties={})
        config = StageConfig(stage, system_properties={})
        assert config.resolve("http.port").as_type(int).get_value() == 8080
        assert config.resolve("http.secure").as_type(bool).get_value() is True
        assert config.simple_subkeys("http") == {"port", "secure", "hosts"}
