"""Unit tests for the recipe IR models."""

import json
from uuid import UUID

import pytest
from pydantic import ValidationError

from cooklang_ir.exceptions import ScalingError
from cooklang_ir.models.amount import MultiAmount, ServingsAmount, SingleAmount
from cooklang_ir.models.models import (
    FrozenDict,
    Ingredient,
    IngredientSpecifier,
    Metadata,
    Recipe,
    Timer,
)


def make_recipe(servings=None, ingredients=None, instruction="mix"):
    return Recipe(
        source="",
        metadata=Metadata(servings=servings, ingredients=ingredients or {}),
        instruction=instruction,
    )


class TestIngredient:
    """Test Ingredient model."""

    def test_defaults(self):
        ingredient = Ingredient(name="salt")
        assert isinstance(ingredient.id, UUID)
        assert ingredient.amount is None
        assert ingredient.unit is None

    def test_ids_differ(self):
        assert Ingredient(name="salt").id != Ingredient(name="salt").id

    def test_frozen(self):
        ingredient = Ingredient(name="salt")
        with pytest.raises(ValidationError):
            ingredient.name = "pepper"

    def test_amount_from_dict(self):
        ingredient = Ingredient(name="eggs", amount={"kind": "servings", "values": [1, 2]})
        assert ingredient.amount == ServingsAmount(values=[1, 2])


class TestImmutability:
    """Test a Recipe cannot be changed after construction."""

    def make(self):
        return Recipe(
            source="use #pan",
            metadata=Metadata(
                servings=[2, 4],
                ominous={"author": "me"},
                ingredients={"eggs": Ingredient(name="eggs")},
                ingredients_specifiers=[IngredientSpecifier(ingredient="eggs")],
                cookware=["pan"],
                timer=[Timer(amount=5, unit="minutes")],
            ),
            instruction="\ue001",
        )

    def test_sequences_are_tuples(self):
        metadata = self.make().metadata
        assert metadata.servings == (2, 4)
        assert metadata.cookware == ("pan",)
        for field in (metadata.servings, metadata.ingredients_specifiers, metadata.cookware, metadata.timer):
            assert isinstance(field, tuple)

    def test_cookware_cannot_grow(self):
        with pytest.raises(AttributeError):
            self.make().metadata.cookware.append("oops")

    @pytest.mark.parametrize("field", ["ominous", "ingredients"])
    def test_mappings_read_only(self, field):
        mapping = getattr(self.make().metadata, field)
        assert isinstance(mapping, FrozenDict)
        with pytest.raises(TypeError):
            mapping["salt"] = "x"
        with pytest.raises(TypeError):
            del mapping[next(iter(mapping))]
        with pytest.raises(TypeError):
            mapping.update(salt="x")
        with pytest.raises(TypeError):
            mapping.clear()

    def test_defaults_read_only(self):
        metadata = Metadata()
        assert metadata.cookware == ()
        with pytest.raises(TypeError):
            metadata.ominous["author"] = "me"

    def test_input_not_aliased(self):
        """Later changes to the caller's containers do not reach the model."""
        ominous = {"author": "me"}
        cookware = ["pan"]
        metadata = Metadata(ominous=ominous, cookware=cookware)
        ominous["author"] = "you"
        cookware.append("pot")
        assert metadata.ominous == {"author": "me"}
        assert metadata.cookware == ("pan",)

    def test_copies_stay_read_only(self):
        recipe = self.make()
        copy = recipe.model_copy(deep=True)
        assert copy == recipe
        with pytest.raises(TypeError):
            copy.metadata.ominous["author"] = "you"


class TestSerialization:
    """Test the IR dumps with camelCase field names."""

    def test_specifier_aliases(self):
        specifier = IngredientSpecifier(ingredient="eggs", amount_in_step=SingleAmount(value=2))
        assert specifier.model_dump(by_alias=True) == {
            "ingredient": "eggs",
            "amountInStep": {"kind": "single", "value": 2.0},
        }

    def test_populate_by_alias(self):
        specifier = IngredientSpecifier.model_validate({"ingredient": "eggs", "amountInStep": None})
        assert specifier.amount_in_step is None

    def test_recipe_json_round_trip(self):
        recipe = Recipe(
            source="@eggs{2}",
            metadata=Metadata(
                servings=[2],
                ominous={"author": "me"},
                ingredients={"eggs": Ingredient(name="eggs", amount=SingleAmount(value=2))},
                ingredients_specifiers=[IngredientSpecifier(ingredient="eggs", amount_in_step=SingleAmount(value=2))],
                cookware=["pan"],
                timer=[Timer(amount=5, unit="minutes")],
            ),
            instruction="@",
        )
        payload = json.loads(recipe.model_dump_json(by_alias=True))
        assert set(payload["metadata"]) == {
            "servings",
            "ominous",
            "ingredients",
            "ingredientsSpecifiers",
            "cookware",
            "timer",
        }
        assert Recipe.model_validate(payload) == recipe


class TestRecipeHelpers:
    """Test step splitting and quantity resolution."""

    def test_steps(self):
        assert make_recipe(instruction="a\nb @\nc").steps() == ["a", "b @", "c"]

    def test_quantities_default_to_first_tier(self):
        recipe = make_recipe(
            servings=[2, 4],
            ingredients={
                "eggs": Ingredient(name="eggs", amount=ServingsAmount(values=[3, 6])),
                "rice": Ingredient(name="rice", amount=MultiAmount(factor=0.5)),
                "salt": Ingredient(name="salt"),
                "pan spray": Ingredient(name="pan spray", amount=SingleAmount(value=1)),
            },
        )
        assert recipe.ingredient_quantities() == {"eggs": 3, "rice": 1, "salt": None, "pan spray": 1}
        assert recipe.ingredient_quantities(4) == {"eggs": 6, "rice": 2, "salt": None, "pan spray": 1}

    def test_quantities_without_servings(self):
        recipe = make_recipe(ingredients={"rice": Ingredient(name="rice", amount=MultiAmount(factor=0.5))})
        with pytest.raises(ScalingError):
            recipe.ingredient_quantities()
        assert recipe.ingredient_quantities(6) == {"rice": 3}
