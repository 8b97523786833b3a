"""Tests for src.config — Settings validation."""

from src.config import Settings
from src.core.schedule_service import ScheduleConfig


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.AI_MODEL == "gpt-4o-mini"
        assert s.AI_TEMPERATURE == 0.3
        assert s.AI_MAX_TOKENS == 2000
        assert s.API_PORT == 8080
        assert s.OPENAI_API_KEY == ""

    def test_placeholder_key_is_dropped(self):
        assert Settings(OPENAI_API_KEY="your-openai-api-key").OPENAI_API_KEY == ""

    def test_key_is_stripped(self):
        assert Settings(OPENAI_API_KEY="  sk-abc  ").OPENAI_API_KEY == "sk-abc"

    def test_blank_url_uses_default(self):
        assert Settings(OPENAI_API_URL="  ").OPENAI_API_URL == "https://api.openai.com/v1"

    def test_numeric_strings_are_parsed(self):
        s = Settings(AI_MAX_TOKENS="512", API_PORT="9000", AI_TEMPERATURE="0.7", AI_TIMEOUT_SECONDS="5")
        assert s.AI_MAX_TOKENS == 512
        assert s.API_PORT == 9000
        assert s.AI_TEMPERATURE == 0.7
        assert s.AI_TIMEOUT_SECONDS == 5.0


class TestScheduleConfig:
    def test_from_settings(self):
        config = ScheduleConfig.from_settings(Settings(OPENAI_API_KEY="sk-abc", AI_MODEL="gpt-4o"))
        assert config.is_configured
        assert config.model == "gpt-4o"
        assert config.defaults.medication_inventory == 30

    def test_unconfigured(self):
        assert not ScheduleConfig.from_settings(Settings()).is_configured
