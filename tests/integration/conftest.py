"""Pytest configuration and fixtures for integration tests.

Clears parser settings from the environment so recipes are parsed with the
default configuration regardless of the developer's .env file.
"""

import pytest

from cooklang_ir.utils.config import Config


@pytest.fixture
def default_config(monkeypatch):
    """Config built from defaults only."""
    for key in (
        "SERVINGS_KEY",
        "INGREDIENT_PLACEHOLDER",
        "COOKWARE_PLACEHOLDER",
        "TIMER_PLACEHOLDER",
        "MAX_RECIPE_SIZE_KB",
    ):
        monkeypatch.delenv(key, raising=False)
    return Config()


@pytest.fixture
def pancakes_source():
    return """\
>> title: Fluffy pancakes
>> servings: 2|4
>> source: https://example.com/pancakes

Whisk @flour{125|250%g}, @baking powder{1|2%tsp} and @salt in a #large bowl{}.
Beat @eggs{1|2} with @milk{150|300%ml} in a #jug.

Pour the wet mix into the #large bowl{} and rest for ~{10%minutes}.
Fry in a #frying pan{} with a little @butter for ~{2%minutes} per side.
Serve with more @salt and @butter.
"""
