"""Reduction of parsed recipe lines into the recipe IR.

Single pass over the lines produced by ``cooklang_ir.parser.grammar``:

- metadata lines fill ``servings`` or the ``ominous`` key/value mapping
- step items are flattened into one instruction string, with a placeholder
  character for every ingredient, cookware and timer mention
- ingredient mentions are recorded twice: once per occurrence in
  ``ingredients_specifiers`` (never deduplicated, in placeholder order) and
  once per name in the ``ingredients`` registry, where amounts are merged

Step text may not contain a placeholder character, so counting placeholders
in the instruction always gives the length of the matching list.
"""

import re
from typing import Optional, assert_never

from cooklang_ir.exceptions import AmountMergeError, AmountParseError, RecipeReductionError
from cooklang_ir.models.amount import Amount, ServingsAmount, merge_amounts, parse_amount
from cooklang_ir.models.ast import (
    ContentItem,
    CookwareItem,
    IngredientItem,
    Line,
    MetadataLine,
    StepLine,
    TimerItem,
)
from cooklang_ir.models.models import (
    COOKWARE_PLACEHOLDER,
    INGREDIENT_PLACEHOLDER,
    STEP_SEPARATOR,
    TIMER_PLACEHOLDER,
    Ingredient,
    IngredientSpecifier,
    Metadata,
    Recipe,
    Timer,
)
from cooklang_ir.utils.logger import logger

DEFAULT_SERVINGS_KEY = "servings"
DEFAULT_PLACEHOLDERS = (INGREDIENT_PLACEHOLDER, COOKWARE_PLACEHOLDER, TIMER_PLACEHOLDER)

_SERVINGS_SEPARATOR_RE = re.compile(r"[|,\-]")
# ASCII digits only, int() rejects other Unicode digits such as '²'
_SERVINGS_TIER_RE = re.compile(r"[0-9]+")


def parse_servings(key: str, value: str) -> tuple[int, ...]:
    """Parse a servings metadata value such as ``2``, ``2|4|8`` or ``2, 4``.

    Raises:
        RecipeReductionError: If the value is not a list of positive integers.
    """
    tiers = []
    for part in _SERVINGS_SEPARATOR_RE.split(value):
        part = part.strip()
        if not _SERVINGS_TIER_RE.fullmatch(part) or int(part) == 0:
            raise RecipeReductionError(f"invalid servings value '{value}'", subject=key)
        tiers.append(int(part))
    return tuple(tiers)


class _Reduction:
    """Mutable state of one reduction. Never shared between calls."""

    def __init__(self, servings_key: str, placeholders: tuple[str, str, str]) -> None:
        self.servings_key = servings_key.lower()
        self.placeholders = placeholders
        self.ingredient_placeholder, self.cookware_placeholder, self.timer_placeholder = placeholders
        self.servings: Optional[tuple[int, ...]] = None
        self.ominous: dict[str, str] = {}
        self.amounts: dict[str, Optional[Amount]] = {}
        self.units: dict[str, Optional[str]] = {}
        self.specifiers: list[IngredientSpecifier] = []
        self.cookware: list[str] = []
        self.timers: list[Timer] = []
        self.steps: list[str] = []

    def add_metadata(self, line: MetadataLine) -> None:
        if line.key.lower() == self.servings_key:
            self.servings = parse_servings(line.key, line.value)
        else:
            self.ominous[line.key] = line.value

    def add_step(self, line: StepLine) -> None:
        parts: list[str] = []
        for item in line.items:
            if item.spaced and parts:
                parts.append(" ")
            match item:
                case ContentItem():
                    self.check_content(item.text)
                    parts.append(item.text)
                case IngredientItem():
                    self.add_ingredient(item)
                    parts.append(self.ingredient_placeholder)
                case CookwareItem():
                    self.cookware.append(item.name)
                    parts.append(self.cookware_placeholder)
                case TimerItem():
                    self.timers.append(Timer(amount=float(item.duration), unit=item.unit))
                    parts.append(self.timer_placeholder)
                case _:
                    assert_never(item)
        self.steps.append("".join(parts))

    def check_content(self, text: str) -> None:
        for placeholder in self.placeholders:
            if placeholder in text:
                raise RecipeReductionError(
                    f"step text contains the placeholder character {placeholder!r}", subject=text
                )

    def add_ingredient(self, item: IngredientItem) -> None:
        try:
            amount, unit = parse_amount(item.raw_amount)
        except AmountParseError as e:
            raise RecipeReductionError(str(e), subject=item.name) from e

        self.specifiers.append(IngredientSpecifier(ingredient=item.name, amount_in_step=amount))

        name = item.name
        if name not in self.amounts:
            self.amounts[name] = amount
            self.units[name] = unit
            return

        known_amount = self.amounts[name]
        known_unit = self.units[name]
        if amount is None:
            # Unquantified mention: its unit is only a label ("a pinch")
            if known_unit is None:
                self.units[name] = unit
            elif unit is not None and unit != known_unit:
                logger.warning(
                    f"Ingredient '{name}' mentioned as '{unit}' after '{known_unit}', "
                    f"keeping '{known_unit}'"
                )
            return
        if known_amount is None:
            # First quantified mention decides the unit
            self.amounts[name] = amount
            self.units[name] = unit
            return
        if unit != known_unit:
            raise RecipeReductionError(
                f"cannot add an amount in {unit or 'no unit'!r} to an amount in {known_unit or 'no unit'!r}",
                subject=name,
            )

        try:
            self.amounts[name] = merge_amounts(known_amount, amount)
        except AmountMergeError as e:
            raise RecipeReductionError(str(e), subject=name) from e

    def check_servings_amounts(self) -> None:
        for specifier in self.specifiers:
            amount = specifier.amount_in_step
            if not isinstance(amount, ServingsAmount):
                continue
            if self.servings is None:
                raise RecipeReductionError(
                    "per-servings amount used but no servings are declared", subject=specifier.ingredient
                )
            if len(amount.values) != len(self.servings):
                raise RecipeReductionError(
                    f"{len(amount.values)} per-servings values given for {len(self.servings)} servings tiers",
                    subject=specifier.ingredient,
                )

    def build(self, source: str) -> Recipe:
        ingredients = {
            name: Ingredient(name=name, amount=amount, unit=self.units[name])
            for name, amount in self.amounts.items()
        }
        metadata = Metadata(
            servings=self.servings,
            ominous=self.ominous,
            ingredients=ingredients,
            ingredients_specifiers=tuple(self.specifiers),
            cookware=tuple(self.cookware),
            timer=tuple(self.timers),
        )
        return Recipe(source=source, metadata=metadata, instruction=STEP_SEPARATOR.join(self.steps))


def reduce_lines(
    source: str,
    lines: list[Line],
    servings_key: str = DEFAULT_SERVINGS_KEY,
    placeholders: tuple[str, str, str] = DEFAULT_PLACEHOLDERS,
) -> Recipe:
    """Reduce parsed lines into a Recipe.

    Args:
        source: Original recipe text, kept verbatim in the result.
        lines: Lines from ``parse_lines``, in source order.
        servings_key: Metadata key declaring the servings tiers (case-insensitive).
        placeholders: Ingredient, cookware and timer placeholder characters.

    Returns:
        Immutable Recipe.

    Raises:
        RecipeReductionError: On malformed servings or amounts, on merging
            amounts of different shapes or units for the same ingredient, or
            on step text containing a placeholder character.
    """
    reduction = _Reduction(servings_key, placeholders)
    for line in lines:
        match line:
            case MetadataLine():
                reduction.add_metadata(line)
            case StepLine():
                reduction.add_step(line)
            case _:
                assert_never(line)
    reduction.check_servings_amounts()
    return reduction.build(source)
