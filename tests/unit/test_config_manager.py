"""Unit tests for the Configuration Manager."""

import json

import pytest

from legal_semantic_diff.config import (
    ConfigurationError,
    ConfigurationManager,
    DiffConfig,
    ValidationResult,
)


class TestDefaults:
    """Tests for the built-in defaults."""

    def test_default_configuration(self):
        manager = ConfigurationManager()
        config = manager.configuration

        assert not manager.is_loaded
        assert config.max_sections == 100
        assert config.excerpt_length == 500
        assert config.duplicate_prefix_length == 100
        assert config.minor_wording_threshold == 0.8
        assert config.lexical_confidence == 0.85
        assert config.section_confidence == 0.9
        assert config.degraded_confidence == 0.6
        assert config.cache_ttl_seconds == 3600

    def test_to_dict(self):
        data = ConfigurationManager().to_dict()
        assert data == DiffConfig().to_dict()
        assert data["scorer_timeout_seconds"] == 10.0


class TestLoading:
    """Tests for loading configuration values."""

    def test_load_flat_dict(self):
        manager = ConfigurationManager()
        result = manager.load({"max_sections": 50, "excerpt_length": 300})

        assert result.is_valid
        assert manager.is_loaded
        assert manager.configuration.max_sections == 50
        assert manager.configuration.excerpt_length == 300
        assert manager.configuration.section_confidence == 0.9

    def test_load_nested_dict(self):
        manager = ConfigurationManager()
        manager.load({"diff": {"minor_wording_threshold": 0.75}})
        assert manager.configuration.minor_wording_threshold == 0.75

    def test_integer_for_float_field_is_converted(self):
        manager = ConfigurationManager()
        manager.load({"scorer_timeout_seconds": 5})
        assert manager.configuration.scorer_timeout_seconds == 5.0
        assert isinstance(manager.configuration.scorer_timeout_seconds, float)

    def test_unknown_key_is_a_warning(self):
        manager = ConfigurationManager()
        result = manager.load({"max_sections": 10, "colour": "blue"})

        assert result.is_valid
        assert any("colour" in w for w in result.warnings)
        assert manager.configuration.max_sections == 10

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "diff.json"
        path.write_text(json.dumps({"diff": {"max_sections": 20}}), encoding="utf-8")

        manager = ConfigurationManager(config_path=path)

        assert manager.is_loaded
        assert manager.configuration.max_sections == 20

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigurationManager().load(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ConfigurationManager().load(path)

    def test_non_object_root(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ConfigurationManager().load(path)


class TestValidation:
    """Tests for value validation."""

    @pytest.mark.parametrize(
        "values",
        [
            {"max_sections": 0},
            {"max_sections": 2.5},
            {"excerpt_length": "long"},
            {"minor_wording_threshold": 1.2},
            {"section_confidence": -0.1},
            {"scorer_timeout_seconds": 0},
            {"cache_max_size": True},
        ],
    )
    def test_invalid_values_raise(self, values):
        manager = ConfigurationManager()
        with pytest.raises(ConfigurationError) as exc_info:
            manager.load(values)

        assert isinstance(exc_info.value.validation_result, ValidationResult)
        assert not exc_info.value.validation_result.is_valid
        assert manager.configuration == DiffConfig()
        assert not manager.is_loaded

    def test_cross_field_warnings(self):
        result = ConfigurationManager().validate(
            {"excerpt_length": 50, "duplicate_prefix_length": 80, "degraded_confidence": 0.95}
        )

        assert result.is_valid
        assert len(result.warnings) == 2

    def test_validation_result_merge(self):
        first = ValidationResult(is_valid=True, warnings=["w"])
        second = ValidationResult(is_valid=False, errors=["e"])

        merged = first.merge(second)

        assert not merged.is_valid
        assert merged.errors == ["e"]
        assert merged.warnings == ["w"]


class TestSaveAndReset:
    """Tests for persisting and resetting configuration."""

    def test_save_and_reload(self, tmp_path):
        manager = ConfigurationManager()
        manager.load({"max_sections": 42})
        path = manager.save(tmp_path / "out" / "diff.json")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["diff"]["max_sections"] == 42

        reloaded = ConfigurationManager(config_path=path)
        assert reloaded.configuration == manager.configuration

    def test_save_without_path(self):
        with pytest.raises(ConfigurationError):
            ConfigurationManager().save()

    def test_reset(self):
        manager = ConfigurationManager()
        manager.load({"max_sections": 5})
        manager.reset()

        assert manager.configuration == DiffConfig()
        assert not manager.is_loaded
