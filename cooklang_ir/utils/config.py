"""Configuration management for the recipe parser.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv

from cooklang_ir.models.models import (
    COOKWARE_PLACEHOLDER,
    INGREDIENT_PLACEHOLDER,
    TIMER_PLACEHOLDER,
)


# Load .env file (if exists, silently continues if missing)
load_dotenv()


class Config:
    """Parser configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Metadata key whose value declares the servings tiers, matched case-insensitively
        self.SERVINGS_KEY: str = os.getenv("SERVINGS_KEY", "servings")
        # Placeholder characters written into the flattened instruction text.
        # The n-th placeholder of a kind links to the n-th entry of the matching IR list.
        # Defaults are private use code points (U+E000..U+E002). With readable ones
        # such as '@', step text containing that character is rejected.
        self.INGREDIENT_PLACEHOLDER: str = os.getenv("INGREDIENT_PLACEHOLDER", INGREDIENT_PLACEHOLDER)
        self.COOKWARE_PLACEHOLDER: str = os.getenv("COOKWARE_PLACEHOLDER", COOKWARE_PLACEHOLDER)
        self.TIMER_PLACEHOLDER: str = os.getenv("TIMER_PLACEHOLDER", TIMER_PLACEHOLDER)
        # Maximum recipe source size (in KB) accepted by parse_recipe. Default: 512 KB
        self.MAX_RECIPE_SIZE_KB: int = int(os.getenv("MAX_RECIPE_SIZE_KB", "512"))

    @property
    def placeholders(self) -> tuple[str, str, str]:
        """Ingredient, cookware and timer placeholders in that order."""
        return (self.INGREDIENT_PLACEHOLDER, self.COOKWARE_PLACEHOLDER, self.TIMER_PLACEHOLDER)

    def validate(self) -> None:
        """Validate configuration.

        Raises:
            ValueError: If invalid values are provided.
        """
        if not self.SERVINGS_KEY.strip():
            raise ValueError("SERVINGS_KEY must not be empty")
        for name, value in (
            ("INGREDIENT_PLACEHOLDER", self.INGREDIENT_PLACEHOLDER),
            ("COOKWARE_PLACEHOLDER", self.COOKWARE_PLACEHOLDER),
            ("TIMER_PLACEHOLDER", self.TIMER_PLACEHOLDER),
        ):
            if len(value) != 1:
                raise ValueError(f"{name} must be a single character, got: {value!r}")
            if value in ("\n", "\r"):
                raise ValueError(f"{name} must not be a line break")
        if len(set(self.placeholders)) != 3:
            raise ValueError(
                f"Placeholders must be distinct, got: {self.placeholders}"
            )
        if self.MAX_RECIPE_SIZE_KB < 1:
            raise ValueError(
                f"MAX_RECIPE_SIZE_KB must be at least 1, got: {self.MAX_RECIPE_SIZE_KB}"
            )


# Create module-level config instance and validate immediately
config = Config()
config.validate()
