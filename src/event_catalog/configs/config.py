"""Configuration loader for the event catalog."""

from pathlib import Path
from typing import Any

import yaml

from event_catalog.configs.settings import Settings, get_settings
from event_catalog.ingestion.exceptions import ConfigurationError
from event_catalog.normalization.rules import NormalizationRules


class Config:
    """Configuration for ingestion passes."""

    CONFIG_DIR = Path(__file__).parent.resolve()

    @classmethod
    def load_ingestion_config(
        cls,
        path: Path | None = None,
        settings: Settings | None = None,
    ) -> dict[str, Any]:
        """
        Load the YAML configuration for ingestion.

        Placeholders like ${DEFAULT_TIMEZONE} are substituted from settings;
        unset settings become empty values.

        Raises:
            ConfigurationError: If the file is missing or not a YAML mapping
        """
        settings = settings or get_settings()
        path = Path(path or settings.INGESTION_CONFIG_PATH)
        if not path.exists():
            raise ConfigurationError(f"Missing config at {path}")

        with open(path, encoding="utf-8") as f:
            content = f.read()

        # Substitute placeholders from settings
        for key, value in settings.model_dump().items():
            placeholder = f"${{{key}}}"
            if placeholder in content:
                content = content.replace(placeholder, "" if value is None else str(value))

        try:
            config = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigurationError(f"Config at {path} must be a mapping")
        return config

    @classmethod
    def load_normalization_rules(cls, config: dict[str, Any] | None = None) -> NormalizationRules:
        """
        Build NormalizationRules from the ``normalization`` section.

        Raises:
            ConfigurationError: If the section holds invalid values
        """
        if config is None:
            config = cls.load_ingestion_config()
        try:
            return NormalizationRules.from_config(config.get("normalization"))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid normalization config: {e}") from e
