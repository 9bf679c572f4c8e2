"""Intermediate representation (IR) of a parsed recipe.

Defines Pydantic models for the reduced recipe. A ``Recipe`` is an immutable
snapshot owned by the caller once reduction completes: models are frozen,
sequences are tuples and mappings are ``FrozenDict``.
Field names serialize in camelCase (``ingredientsSpecifiers``, ``amountInStep``)
and can be populated either by alias or by field name.
"""

from typing import Annotated, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from cooklang_ir.models.amount import Amount, resolve_amount

# Separator placed between steps in Recipe.instruction
STEP_SEPARATOR = "\n"

# Placeholders written into Recipe.instruction for every mention.
# Private use code points, so they never clash with recipe prose.
INGREDIENT_PLACEHOLDER = "\ue000"
COOKWARE_PLACEHOLDER = "\ue001"
TIMER_PLACEHOLDER = "\ue002"


class FrozenDict(dict):
    """Read-only dict. Serializes and compares like a plain dict."""

    def _read_only(self, *args, **kwargs):
        raise TypeError(f"'{type(self).__name__}' object is read-only")

    __setitem__ = __delitem__ = __ior__ = _read_only
    clear = pop = popitem = setdefault = update = _read_only

    def __reduce__(self):
        return type(self), (dict(self),)


class _IRModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Ingredient(_IRModel):
    """Registry entry for an ingredient, merged over all of its mentions."""

    name: Annotated[str, Field(description="Name as written, used as the registry key")]
    id: Annotated[UUID, Field(default_factory=uuid4, description="Process-unique identifier")]
    amount: Annotated[
        Optional[Amount],
        Field(None, description="Sum of the amounts of every mention, None if no mention was quantified"),
    ]
    unit: Annotated[Optional[str], Field(None, description="Unit this ingredient is measured in")]


class IngredientSpecifier(_IRModel):
    """One ingredient mention in the instruction text.

    The n-th ingredient placeholder in ``Recipe.instruction`` is the n-th
    specifier of ``Metadata.ingredients_specifiers``.
    """

    ingredient: Annotated[str, Field(description="Name of the referenced entry in Metadata.ingredients")]
    amount_in_step: Annotated[Optional[Amount], Field(None, description="Amount used in this mention")]


class Timer(_IRModel):
    """Timer to set at this point of the instructions."""

    amount: float
    unit: str


class Metadata(_IRModel):
    """Metadata extracted from a recipe, plus the side lists linked from the instruction."""

    servings: Annotated[Optional[tuple[int, ...]], Field(None, description="Declared servings tiers")]
    ominous: Annotated[
        dict[str, str], Field(default_factory=FrozenDict, description="Every other metadata key/value pair")
    ]
    ingredients: Annotated[dict[str, Ingredient], Field(default_factory=FrozenDict)]
    ingredients_specifiers: Annotated[tuple[IngredientSpecifier, ...], Field(default_factory=tuple)]
    cookware: Annotated[tuple[str, ...], Field(default_factory=tuple)]
    timer: Annotated[tuple[Timer, ...], Field(default_factory=tuple)]

    @field_validator("ominous", "ingredients", mode="after")
    @classmethod
    def freeze_mapping(cls, value: dict) -> FrozenDict:
        return FrozenDict(value)


class Recipe(_IRModel):
    """Reduced recipe.

    ``instruction`` holds the steps joined by ``STEP_SEPARATOR``. Every
    ingredient, cookware and timer mention is replaced by a placeholder
    character (``INGREDIENT_PLACEHOLDER`` and friends by default); the n-th
    placeholder of a kind links to the n-th entry of ``ingredients_specifiers``,
    ``cookware`` or ``timer`` respectively.
    """

    source: Annotated[str, Field(description="Raw recipe text this recipe was generated from")]
    metadata: Metadata
    instruction: str

    def steps(self) -> list[str]:
        """Split the instruction back into display steps."""
        if not self.instruction:
            return []
        return self.instruction.split(STEP_SEPARATOR)

    def ingredient_quantities(self, servings: Optional[int] = None) -> dict[str, Optional[float]]:
        """Resolve the total quantity of every ingredient for a servings count.

        Args:
            servings: Servings count. Defaults to the first declared servings tier.

        Returns:
            Mapping of ingredient name to absolute quantity, None for unquantified ingredients.

        Raises:
            ScalingError: If an amount cannot be resolved for the servings count.
        """
        tiers = self.metadata.servings
        if servings is None and tiers:
            servings = tiers[0]
        return {
            name: None if ingredient.amount is None else resolve_amount(ingredient.amount, servings, tiers)
            for name, ingredient in self.metadata.ingredients.items()
        }
