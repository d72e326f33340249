"""
Configuration loading with validation.

Supports YAML and JSON formats. A file is checked against the JSON Schema,
then built into pydantic models, then every fluid cooler's design inputs
are checked as a whole.
"""

import yaml
import json
from pathlib import Path
from typing import Dict, Any, Optional
import jsonschema
import logging

from pydantic import ValidationError

from fluid_cooler.config.models import PlantConfig
from fluid_cooler.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Configuration loader with schema validation.

    Example:
        loader = ConfigLoader()
        config = loader.load_yaml("fluid_cooler/config/examples/two_speed_plant.yaml")
    """

    def __init__(self, schema_path: Optional[Path] = None):
        """
        Args:
            schema_path: Path to JSON schema file (uses default if None)
        """
        if schema_path is None:
            schema_path = Path(__file__).parent / "schemas" / "fluid_cooler_schema_v1.json"

        self.schema_path = Path(schema_path)
        self.schema = self._load_schema()

    def _load_schema(self) -> Dict[str, Any]:
        try:
            with open(self.schema_path, 'r') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not load schema from {self.schema_path}: {e}") from e

    def load(self, config_path: Path | str) -> PlantConfig:
        """Load by file extension (.json, otherwise YAML)."""
        if Path(config_path).suffix.lower() == ".json":
            return self.load_json(config_path)
        return self.load_yaml(config_path)

    def load_yaml(self, config_path: Path | str) -> PlantConfig:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If file not found or validation fails
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML: {e}") from e

        return self.from_dict(config_dict, base_dir=config_path.parent)

    def load_json(self, config_path: Path | str) -> PlantConfig:
        """
        Load configuration from JSON file.

        Raises:
            ConfigurationError: If file not found or validation fails
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse JSON: {e}") from e

        return self.from_dict(config_dict, base_dir=config_path.parent)

    def from_dict(self, config_dict: Dict[str, Any], base_dir: Optional[Path] = None) -> PlantConfig:
        """
        Convert a dictionary to PlantConfig with validation.

        Raises:
            ConfigurationError: If validation fails
        """
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration root must be a mapping")

        try:
            jsonschema.validate(instance=config_dict, schema=self.schema)
            logger.debug("JSON schema validation passed")
        except jsonschema.ValidationError as e:
            path = "/".join(str(p) for p in e.absolute_path)
            raise ConfigurationError(f"Schema validation failed at '{path}': {e.message}") from e

        try:
            config = PlantConfig(**config_dict)
        except (ValidationError, ConfigurationError) as e:
            raise ConfigurationError(f"Failed to build PlantConfig: {e}") from e

        if base_dir is not None:
            config.base_dir = str(base_dir)

        self._validate(config)
        logger.info(
            f"Loaded configuration: {len(config.loops)} loop(s), "
            f"{len(config.fluid_coolers)} fluid cooler(s)"
        )
        return config

    def _validate(self, config: PlantConfig) -> None:
        """Cross-reference checks plus each cooler's design checks, all errors at once."""
        errors = []
        loop_names = {loop.name.upper() for loop in config.loops}
        seen = set()
        for spec in config.fluid_coolers:
            key = spec.name.upper()
            if key in seen:
                errors.append(f"Fluid cooler '{spec.name}' defined twice")
            seen.add(key)
            if spec.loop.upper() not in loop_names:
                errors.append(f"Fluid cooler '{spec.name}' references unknown loop '{spec.loop}'")
            try:
                spec.validate_design()
            except ConfigurationError as e:
                errors.append(str(e))

        if errors:
            for line in errors:
                logger.error(line)
            raise ConfigurationError("Configuration validation failed:\n" + "\n".join(errors))
