"""Unit tests for configuration management."""

import pytest

from cooklang_ir.models.models import (
    COOKWARE_PLACEHOLDER,
    INGREDIENT_PLACEHOLDER,
    TIMER_PLACEHOLDER,
)
from cooklang_ir.utils.config import Config


@pytest.fixture
def clean_env(monkeypatch):
    for key in (
        "SERVINGS_KEY",
        "INGREDIENT_PLACEHOLDER",
        "COOKWARE_PLACEHOLDER",
        "TIMER_PLACEHOLDER",
        "MAX_RECIPE_SIZE_KB",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestConfigInitialization:
    """Test Config class initialization and environment variable loading."""

    def test_config_loads_default_values(self, clean_env):
        config = Config()

        assert config.SERVINGS_KEY == "servings"
        assert config.INGREDIENT_PLACEHOLDER == INGREDIENT_PLACEHOLDER == "\ue000"
        assert config.COOKWARE_PLACEHOLDER == COOKWARE_PLACEHOLDER == "\ue001"
        assert config.TIMER_PLACEHOLDER == TIMER_PLACEHOLDER == "\ue002"
        assert config.MAX_RECIPE_SIZE_KB == 512
        assert config.placeholders == (INGREDIENT_PLACEHOLDER, COOKWARE_PLACEHOLDER, TIMER_PLACEHOLDER)

    def test_config_loads_from_environment(self, clean_env):
        clean_env.setenv("SERVINGS_KEY", "portions")
        clean_env.setenv("INGREDIENT_PLACEHOLDER", "I")
        clean_env.setenv("MAX_RECIPE_SIZE_KB", "64")

        config = Config()

        assert config.SERVINGS_KEY == "portions"
        assert config.placeholders == ("I", COOKWARE_PLACEHOLDER, TIMER_PLACEHOLDER)
        assert config.MAX_RECIPE_SIZE_KB == 64

    def test_config_invalid_number(self, clean_env):
        clean_env.setenv("MAX_RECIPE_SIZE_KB", "lots")
        with pytest.raises(ValueError):
            Config()


class TestConfigValidation:
    """Test Config.validate method."""

    def test_defaults_are_valid(self, clean_env):
        Config().validate()

    def test_empty_servings_key(self, clean_env):
        clean_env.setenv("SERVINGS_KEY", "  ")
        with pytest.raises(ValueError, match="SERVINGS_KEY"):
            Config().validate()

    @pytest.mark.parametrize("value", ["", "@@", "\n"])
    def test_invalid_placeholder(self, clean_env, value):
        clean_env.setenv("TIMER_PLACEHOLDER", value)
        with pytest.raises(ValueError, match="TIMER_PLACEHOLDER"):
            Config().validate()

    def test_placeholders_must_be_distinct(self, clean_env):
        clean_env.setenv("COOKWARE_PLACEHOLDER", INGREDIENT_PLACEHOLDER)
        with pytest.raises(ValueError, match="distinct"):
            Config().validate()

    def test_max_recipe_size_must_be_positive(self, clean_env):
        clean_env.setenv("MAX_RECIPE_SIZE_KB", "0")
        with pytest.raises(ValueError, match="MAX_RECIPE_SIZE_KB"):
            Config().validate()
