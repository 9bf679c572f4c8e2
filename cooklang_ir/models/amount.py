"""Amount model for ingredient quantities.

An amount is exactly one of three shapes:

- ``MultiAmount``: a factor multiplied by the chosen servings count.
- ``ServingsAmount``: one absolute value per declared servings tier.
- ``SingleAmount``: a fixed value that does not depend on servings.

A mention without any quantity has no amount at all and is represented by
``None`` rather than by a fourth variant. ``merge_amounts`` treats ``None`` as
the identity, so merging an unquantified mention never fails.

Amount text written inside ``@name{...}`` uses the following convention:

    ""            -> no amount, no unit
    "2"           -> SingleAmount(2)
    "1/2%cup"     -> SingleAmount(0.5), unit "cup"
    "1 1/2 cups"  -> SingleAmount(1.5), unit "cups"
    "1kg"         -> SingleAmount(1), unit "kg"
    "2|4|8"       -> ServingsAmount((2, 4, 8)), one value per servings tier
    "0.5*%kg"     -> MultiAmount(0.5), unit "kg"
    "a pinch"     -> no amount, unit "a pinch"
"""

import re
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from cooklang_ir.exceptions import AmountMergeError, AmountParseError, ScalingError


class MultiAmount(BaseModel):
    """Scalable amount: ``factor`` is multiplied by the servings count."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["multi"] = "multi"
    factor: Annotated[float, Field(description="Quantity needed per serving")]

    def __add__(self, other: "Amount") -> "MultiAmount":
        if not isinstance(other, MultiAmount):
            raise AmountMergeError(self.kind, _kind_of(other))
        return MultiAmount(factor=self.factor + other.factor)


class ServingsAmount(BaseModel):
    """Static per-servings amount: ``values[i]`` belongs to the i-th servings tier."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["servings"] = "servings"
    values: Annotated[
        tuple[float, ...],
        Field(min_length=1, description="Absolute quantity for each declared servings tier"),
    ]

    def __add__(self, other: "Amount") -> "ServingsAmount":
        if not isinstance(other, ServingsAmount):
            raise AmountMergeError(self.kind, _kind_of(other))
        if len(self.values) != len(other.values):
            raise AmountMergeError(
                f"{self.kind}[{len(self.values)}]", f"{other.kind}[{len(other.values)}]"
            )
        return ServingsAmount(values=tuple(a + b for a, b in zip(self.values, other.values)))


class SingleAmount(BaseModel):
    """Static amount, independent of servings."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["single"] = "single"
    value: float

    def __add__(self, other: "Amount") -> "SingleAmount":
        if not isinstance(other, SingleAmount):
            raise AmountMergeError(self.kind, _kind_of(other))
        return SingleAmount(value=self.value + other.value)


Amount = Annotated[Union[MultiAmount, ServingsAmount, SingleAmount], Field(discriminator="kind")]


def _kind_of(amount: object) -> str:
    return getattr(amount, "kind", type(amount).__name__)


def merge_amounts(existing: Optional[Amount], new: Optional[Amount]) -> Optional[Amount]:
    """Add two optional amounts; ``None`` on either side yields the other operand.

    Raises:
        AmountMergeError: If both amounts are present but of different shapes.
    """
    if existing is None:
        return new
    if new is None:
        return existing
    return existing + new


# ============================================================================
# Parsing
# ============================================================================

# decimal, fraction or mixed number ("1 1/2")
_NUMBER = r"(?:\d+\s+\d+\s*/\s*\d+|\d+(?:\.\d+)?(?:\s*/\s*\d+)?|\.\d+)"
_QUANTITY = rf"{_NUMBER}(?:\s*\|\s*{_NUMBER})*(?:\s*\*)?"
_QUANTITY_RE = re.compile(_QUANTITY)
_LEADING_QUANTITY_RE = re.compile(rf"(?P<quantity>{_QUANTITY})(?P<unit>.*)", re.DOTALL)
_MIXED_RE = re.compile(r"(\d+)\s+(\d+)\s*/\s*(\d+)")
_FRACTION_RE = re.compile(r"(\d+(?:\.\d+)?)\s*/\s*(\d+)")


def _parse_number(text: str, raw: str) -> float:
    text = text.strip()
    mixed = _MIXED_RE.fullmatch(text)
    if mixed:
        whole, numerator, denominator = (int(g) for g in mixed.groups())
        if denominator == 0:
            raise AmountParseError(raw, "division by zero")
        return whole + numerator / denominator
    fraction = _FRACTION_RE.fullmatch(text)
    if fraction:
        numerator, denominator = float(fraction.group(1)), int(fraction.group(2))
        if denominator == 0:
            raise AmountParseError(raw, "division by zero")
        return numerator / denominator
    try:
        return float(text)
    except ValueError:
        raise AmountParseError(raw) from None


def _quantity_to_amount(quantity: str, raw: str) -> Amount:
    quantity = quantity.strip()
    scaled = quantity.endswith("*")
    if scaled:
        quantity = quantity[:-1]
    if "|" in quantity:
        if scaled:
            raise AmountParseError(raw, "'*' cannot be combined with per-servings values")
        return ServingsAmount(values=tuple(_parse_number(part, raw) for part in quantity.split("|")))
    if scaled:
        return MultiAmount(factor=_parse_number(quantity, raw))
    return SingleAmount(value=_parse_number(quantity, raw))


def parse_amount(raw: str) -> tuple[Optional[Amount], Optional[str]]:
    """Parse the text of an ingredient's braces into an amount and a unit.

    Args:
        raw: Text between ``{`` and ``}``, possibly empty.

    Returns:
        Tuple of (amount or None, unit or None).

    Raises:
        AmountParseError: If an explicit ``quantity%unit`` has a malformed quantity.
    """
    text = raw.strip()
    if not text:
        return None, None

    if "%" in text:
        quantity, unit = text.split("%", 1)
        unit = unit.strip() or None
        if not quantity.strip():
            return None, unit
        if not _QUANTITY_RE.fullmatch(quantity.strip()):
            raise AmountParseError(raw)
        return _quantity_to_amount(quantity, raw), unit

    match = _LEADING_QUANTITY_RE.fullmatch(text)
    if not match:
        # No numeric quantity at all ("a pinch"): keep the text as an opaque unit
        return None, text
    unit = match.group("unit").strip() or None
    return _quantity_to_amount(match.group("quantity"), raw), unit


def resolve_amount(amount: Amount, servings: Optional[int], tiers: Optional[tuple[int, ...]]) -> float:
    """Materialize an absolute quantity for a servings count.

    Args:
        amount: Amount to resolve.
        servings: Servings count to resolve for. Required for Multi and Servings amounts.
        tiers: Servings tiers declared in the recipe metadata.

    Raises:
        ScalingError: If the amount cannot be resolved for the given servings.
    """
    if isinstance(amount, SingleAmount):
        return amount.value
    if servings is None:
        raise ScalingError(f"A servings count is required to resolve a {amount.kind} amount")
    if isinstance(amount, MultiAmount):
        return amount.factor * servings
    if isinstance(amount, ServingsAmount):
        if not tiers or servings not in tiers:
            raise ScalingError(f"{servings} is not a declared servings tier: {tiers}")
        index = tiers.index(servings)
        if index >= len(amount.values):
            raise ScalingError(f"No value for servings tier {servings} in {list(amount.values)}")
        return amount.values[index]
    raise TypeError(f"Unknown amount type: {type(amount).__name__}")
