"""Configuration Manager implementation for the semantic diff engine.

Loads, validates and exposes the DiffConfig used by the diff pipeline.
Configuration can come from a JSON file or from a dictionary; unknown keys
produce warnings, out-of-range values produce errors.
"""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .models import ConfigurationError, DiffConfig, ValidationResult


@dataclass(frozen=True)
class _FieldRule:
    """Type and range constraint for one DiffConfig field."""
    kind: type
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: bool = False


_FIELD_RULES: Dict[str, _FieldRule] = {
    "max_sections": _FieldRule(int, minimum=1),
    "excerpt_length": _FieldRule(int, minimum=1),
    "duplicate_prefix_length": _FieldRule(int, minimum=1),
    "minor_wording_threshold": _FieldRule(float, minimum=0.0, maximum=1.0),
    "lexical_confidence": _FieldRule(float, minimum=0.0, maximum=1.0),
    "section_confidence": _FieldRule(float, minimum=0.0, maximum=1.0),
    "degraded_confidence": _FieldRule(float, minimum=0.0, maximum=1.0),
    "scorer_excerpt_length": _FieldRule(int, minimum=1),
    "scorer_max_tokens": _FieldRule(int, minimum=1),
    "scorer_temperature": _FieldRule(float, minimum=0.0, maximum=2.0),
    "scorer_timeout_seconds": _FieldRule(float, minimum=0.0, exclusive_minimum=True),
    "cache_ttl_seconds": _FieldRule(int, minimum=1),
    "cache_max_size": _FieldRule(int, minimum=1),
}


class ConfigurationManager:
    """
    Manager for the diff engine configuration.

    Starts from the built-in defaults; ``load`` overlays values from a JSON
    file or dictionary after validating them.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Optional JSON file to load immediately.

        Raises:
            ConfigurationError: If the file is missing or invalid.
        """
        self._config_path = Path(config_path) if config_path else None
        self._configuration = DiffConfig()
        self._is_loaded = False
        if self._config_path is not None:
            self.load(self._config_path)

    @property
    def configuration(self) -> DiffConfig:
        """Get the current configuration."""
        return self._configuration

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    def load(self, source: Union[str, Path, Dict[str, Any]]) -> ValidationResult:
        """
        Load and validate configuration values.

        Keys that are not given keep their default values.

        Args:
            source: JSON file path or dictionary of values.

        Returns:
            ValidationResult with any warnings (e.g. unknown keys).

        Raises:
            ConfigurationError: If validation fails; the current
                configuration is left unchanged.
        """
        raw_data = self._parse_source(source)
        if not isinstance(raw_data, dict):
            raise ConfigurationError("Configuration must be a JSON object")

        # Accept both {"diff": {...}} and a flat object.
        values = raw_data.get("diff", raw_data)
        if not isinstance(values, dict):
            raise ConfigurationError("'diff' section must be a JSON object")

        result = self.validate(values)
        if not result.is_valid:
            raise ConfigurationError(
                "Diff configuration validation failed",
                validation_result=result
            )

        known = {f.name for f in fields(DiffConfig)}
        merged = self._configuration.to_dict()
        for key, value in values.items():
            if key not in known:
                continue
            rule = _FIELD_RULES[key]
            merged[key] = float(value) if rule.kind is float else value

        self._configuration = DiffConfig(**merged)
        self._is_loaded = True
        return result

    def validate(self, values: Dict[str, Any]) -> ValidationResult:
        """
        Validate a dictionary of configuration values.

        Args:
            values: Field names mapped to candidate values.

        Returns:
            ValidationResult describing errors and warnings.
        """
        result = ValidationResult(is_valid=True)

        for key, value in values.items():
            rule = _FIELD_RULES.get(key)
            if rule is None:
                result.add_warning(f"Unknown configuration key '{key}' ignored")
                continue
            self._validate_field(key, value, rule, result)

        if not result.is_valid:
            return result

        excerpt = values.get("excerpt_length", self._configuration.excerpt_length)
        prefix = values.get("duplicate_prefix_length", self._configuration.duplicate_prefix_length)
        if prefix > excerpt:
            result.add_warning(
                "'duplicate_prefix_length' exceeds 'excerpt_length'; "
                "section changes will rarely be recognized as duplicates"
            )

        degraded = values.get("degraded_confidence", self._configuration.degraded_confidence)
        section = values.get("section_confidence", self._configuration.section_confidence)
        if degraded > section:
            result.add_warning(
                "'degraded_confidence' is higher than 'section_confidence'"
            )

        return result

    def _validate_field(
        self,
        key: str,
        value: Any,
        rule: _FieldRule,
        result: ValidationResult
    ) -> None:
        """Validate one value against its rule."""
        # bool is an int subclass; it is never a valid numeric setting here.
        if isinstance(value, bool):
            result.add_error(f"'{key}' must be a number, got a boolean")
            return

        if rule.kind is int and not isinstance(value, int):
            result.add_error(f"'{key}' must be an integer")
            return
        if rule.kind is float and not isinstance(value, (int, float)):
            result.add_error(f"'{key}' must be a number")
            return

        if rule.minimum is not None:
            if rule.exclusive_minimum and value <= rule.minimum:
                result.add_error(f"'{key}' must be greater than {rule.minimum}")
            elif not rule.exclusive_minimum and value < rule.minimum:
                result.add_error(f"'{key}' must be at least {rule.minimum}")
        if rule.maximum is not None and value > rule.maximum:
            result.add_error(f"'{key}' must be at most {rule.maximum}")

    def _parse_source(
        self,
        source: Union[str, Path, Dict[str, Any]]
    ) -> Any:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")

            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

        return source

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Save the current configuration as JSON.

        Args:
            path: Target file. Defaults to the file the manager was
                created with.

        Returns:
            The path written to.

        Raises:
            ConfigurationError: If no path is known.
        """
        target = Path(path) if path else self._config_path
        if target is None:
            raise ConfigurationError("No configuration path specified")

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            json.dump({"diff": self.to_dict()}, f, indent=2, ensure_ascii=False)
        return target

    def reset(self) -> None:
        """Reset configuration to the defaults."""
        self._configuration = DiffConfig()
        self._is_loaded = False

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as a dictionary."""
        return self._configuration.to_dict()
