"""Line and step items produced by the recipe grammar.

These objects are transient: they live only between grammar recognition and
reduction into the IR (see ``cooklang_ir.models.models``). Every step item
records whether whitespace separated it from the previous item, which the
reducer needs to rebuild readable instruction text. The flag is left out of
equality so that ``chop @cucumber finely`` and ``chop@cucumber{}finely`` compare
as the same step.
"""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class ContentItem:
    """Literal prose between annotations."""

    text: str
    spaced: bool = field(default=False, compare=False, repr=False)


@dataclass(frozen=True)
class IngredientItem:
    """Ingredient mention. ``raw_amount`` is the unparsed text between braces."""

    name: str
    raw_amount: str = ""
    spaced: bool = field(default=False, compare=False, repr=False)


@dataclass(frozen=True)
class CookwareItem:
    name: str
    spaced: bool = field(default=False, compare=False, repr=False)


@dataclass(frozen=True)
class TimerItem:
    duration: int
    unit: str = ""
    spaced: bool = field(default=False, compare=False, repr=False)


StepItem = Union[ContentItem, IngredientItem, CookwareItem, TimerItem]


@dataclass(frozen=True)
class MetadataLine:
    """``>> key: value`` line."""

    key: str
    value: str


@dataclass(frozen=True)
class StepLine:
    items: tuple[StepItem, ...]


Line = Union[MetadataLine, StepLine]
