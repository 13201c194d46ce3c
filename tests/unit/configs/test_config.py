"""Unit tests for the ingestion config loader."""

import pytest

from event_catalog.configs.config import Config
from event_catalog.configs.settings import Settings
from event_catalog.ingestion.exceptions import ConfigurationError
from event_catalog.schemas.event import EventStatus


class TestLoadIngestionConfig:
    """Tests for Config.load_ingestion_config."""

    def test_shipped_config(self):
        config = Config.load_ingestion_config(settings=Settings(TIME_BUCKET_MINUTES=15))
        assert config["deduplication"]["strategy"] == "fingerprint"
        assert config["deduplication"]["bucket_minutes"] == 15
        assert config["normalization"]["default_timezone"] == "Europe/Lisbon"

    def test_placeholders_substituted(self, tmp_path):
        path = tmp_path / "ingestion.yaml"
        path.write_text("feeds:\n  events: ${EVENTS_CSV_URL}\n  venues: ${VENUES_CSV_URL}\n")
        settings = Settings(EVENTS_CSV_URL="https://example.com/e.csv")
        config = Config.load_ingestion_config(path, settings=settings)
        assert config["feeds"]["events"] == "https://example.com/e.csv"
        assert config["feeds"]["venues"] is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Missing config"):
            Config.load_ingestion_config(tmp_path / "absent.yaml", settings=Settings())

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("deduplication: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            Config.load_ingestion_config(path, settings=Settings())

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ConfigurationError):
            Config.load_ingestion_config(path, settings=Settings())

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Config.load_ingestion_config(path, settings=Settings()) == {}


class TestLoadNormalizationRules:
    """Tests for Config.load_normalization_rules."""

    def test_shipped_rules(self):
        config = Config.load_ingestion_config(settings=Settings())
        rules = Config.load_normalization_rules(config)
        assert rules.status_aliases["esgotado"] == EventStatus.SOLD_OUT
        assert rules.status_aliases["cancelled"] == EventStatus.CANCELLED
        assert rules.max_event_tags == 5
        assert rules.allowed_event_tags == frozenset()

    def test_missing_section_uses_defaults(self):
        rules = Config.load_normalization_rules({})
        assert rules.default_opening_time == "10:00"

    @pytest.mark.parametrize(
        "section",
        [
            {"status_aliases": {"live": "on_air"}},
            {"max_event_tags": 0},
            {"max_event_tags": "many"},
            {"default_opening_time": "25:99"},
        ],
    )
    def test_invalid_section(self, section):
        with pytest.raises(ConfigurationError):
            Config.load_normalization_rules({"normalization": section})
