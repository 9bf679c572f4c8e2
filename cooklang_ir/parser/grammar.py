"""Line and step grammar for recipe markup.

Every non-blank line is either metadata or a step:

    >> servings: 2|4
    Crack @eggs{3} into a #bowl and whisk for ~{2%minutes}.

Inside a step three annotations are recognized:

- ``@name`` / ``@multi word name{amount}``: ingredient
- ``#name`` / ``#multi word name{}``: cookware
- ``~{duration%unit}``: timer

A long form name runs up to the opening ``{`` but never across another marker,
so in ``@salt and @pepper{}`` the first mention is the short form ``salt``.
A short form name ends at whitespace; trailing punctuation stays content.
A marker that does not start a valid annotation is kept as literal content.
"""

import re

from cooklang_ir.exceptions import RecipeSyntaxError
from cooklang_ir.models.ast import (
    ContentItem,
    CookwareItem,
    IngredientItem,
    Line,
    MetadataLine,
    StepItem,
    StepLine,
    TimerItem,
)
from cooklang_ir.utils.logger import logger

METADATA_MARKER = ">>"
INGREDIENT_MARKER = "@"
COOKWARE_MARKER = "#"
TIMER_MARKER = "~"
MARKERS = INGREDIENT_MARKER + COOKWARE_MARKER + TIMER_MARKER

_LONG_NAME_RE = re.compile(r"[^\s@#~{}][^@#~{}]*\{")
# Trailing punctuation ("#jug.") stays content
_SHORT_NAME_RE = re.compile(r"[^\s@#~{}]*[^\s@#~{}.,;:!?)\]\"]")
_BLOCK_BODY_RE = re.compile(r"[^{}]*\}")
_METADATA_COLON_RE = re.compile(r"(?<!\\):")
_DURATION_RE = re.compile(r"[0-9]+")
# Only \n and \r\n end a line; form feeds and other Unicode breaks stay content
_LINE_BREAK_RE = re.compile(r"\r?\n")


def parse_lines(text: str) -> list[Line]:
    """Parse recipe markup into metadata and step lines.

    Args:
        text: Full recipe source.

    Returns:
        Lines in source order. Blank lines are dropped.

    Raises:
        RecipeSyntaxError: On a malformed metadata line or annotation.
    """
    lines: list[Line] = []
    for line_number, raw_line in enumerate(_LINE_BREAK_RE.split(text), start=1):
        stripped = raw_line.strip()
        if not stripped:
            continue
        offset = len(raw_line) - len(raw_line.lstrip())
        if stripped.startswith(METADATA_MARKER):
            line: Line = _parse_metadata(stripped, line_number, offset)
        else:
            line = StepLine(items=tuple(_scan_step(stripped, line_number, offset)))
        logger.debug(f"Parsed line {line_number}: {line}", extra={"line_number": line_number})
        lines.append(line)
    return lines


def _parse_metadata(text: str, line_number: int, offset: int) -> MetadataLine:
    body = text[len(METADATA_MARKER):]
    colon = _METADATA_COLON_RE.search(body)
    if colon is None:
        raise RecipeSyntaxError("metadata line is missing ':'", line_number, offset + 1)
    key = body[: colon.start()].strip().replace("\\:", ":")
    if not key:
        raise RecipeSyntaxError("metadata key is empty", line_number, offset + 1)
    return MetadataLine(key=key, value=body[colon.end():].strip())


def _scan_step(text: str, line_number: int, offset: int) -> list[StepItem]:
    items: list[StepItem] = []

    def flush(segment: str) -> bool:
        # Returns whether the segment ended in whitespace
        stripped = segment.strip()
        if stripped:
            items.append(ContentItem(text=stripped, spaced=segment[:1].isspace()))
        return segment[-1:].isspace()

    content_start = 0
    pos = 0
    while pos < len(text):
        if text[pos] in MARKERS:
            scanned = _scan_annotation(text, pos, line_number, offset)
            if scanned is not None:
                item_type, args, end = scanned
                spaced = flush(text[content_start:pos])
                items.append(item_type(*args, spaced=spaced))
                pos = content_start = end
                continue
        pos += 1
    flush(text[content_start:])
    return items


def _find_block_end(text: str, brace: int, line_number: int, offset: int) -> int:
    body = _BLOCK_BODY_RE.match(text, brace + 1)
    if body is None:
        raise RecipeSyntaxError("unterminated '{'", line_number, offset + brace + 1)
    return body.end() - 1


def _scan_annotation(text: str, pos: int, line_number: int, offset: int):
    """Recognize the annotation starting at ``text[pos]``.

    Returns ``(item_type, args, end)`` or None when the marker is literal content.
    """
    marker = text[pos]
    start = pos + 1

    if marker == TIMER_MARKER:
        if not text.startswith("{", start):
            return None
        close = _find_block_end(text, start, line_number, offset)
        duration_text, _, unit = text[start + 1 : close].partition("%")
        duration_text = duration_text.strip()
        if not _DURATION_RE.fullmatch(duration_text):
            raise RecipeSyntaxError(
                f"invalid timer duration '{duration_text}'", line_number, offset + start + 2
            )
        return TimerItem, (int(duration_text), unit.strip()), close + 1

    long_name = _LONG_NAME_RE.match(text, start)
    if long_name is not None:
        brace = long_name.end() - 1
        close = _find_block_end(text, brace, line_number, offset)
        name = text[start:brace].rstrip()
        payload = text[brace + 1 : close]
        end = close + 1
    else:
        short_name = _SHORT_NAME_RE.match(text, start)
        if short_name is None:
            return None
        name = short_name.group()
        payload = ""
        end = short_name.end()

    if marker == INGREDIENT_MARKER:
        return IngredientItem, (name, payload.strip()), end
    if payload.strip():
        logger.debug(
            f"Ignoring payload '{payload}' of cookware '{name}'", extra={"line_number": line_number}
        )
    return CookwareItem, (name,), end
