"""Recipe parsing entry point.

Runs the two stages in order:

1. parse_lines(): markup -> metadata and step lines
2. reduce_lines(): lines -> immutable Recipe IR

Any syntax or reduction error aborts the whole document; no partial recipe is returned.
"""

import time
from typing import Optional

from cooklang_ir.exceptions import CooklangError
from cooklang_ir.models.models import Recipe
from cooklang_ir.parser.grammar import parse_lines
from cooklang_ir.parser.reducer import reduce_lines
from cooklang_ir.utils.config import Config
from cooklang_ir.utils.config import config as default_config
from cooklang_ir.utils.logger import logger


def validate_recipe_size(text: str, cfg: Config) -> bool:
    """Check recipe source is within MAX_RECIPE_SIZE_KB.

    Args:
        text: Recipe source.
        cfg: Configuration holding the size limit.

    Returns:
        True if the encoded source fits the limit, False otherwise.
    """
    return len(text.encode("utf-8")) <= cfg.MAX_RECIPE_SIZE_KB * 1024


def parse_recipe(text: str, cfg: Optional[Config] = None) -> Recipe:
    """Parse recipe markup into a Recipe.

    Args:
        text: Full recipe source.
        cfg: Configuration to use. Defaults to the module-level config.

    Returns:
        Reduced, immutable Recipe.

    Raises:
        ValueError: If the source exceeds MAX_RECIPE_SIZE_KB.
        RecipeSyntaxError: If a line cannot be parsed.
        RecipeReductionError: If the parsed lines cannot be reduced.
    """
    cfg = cfg or default_config
    if not validate_recipe_size(text, cfg):
        raise ValueError(f"Recipe source exceeds {cfg.MAX_RECIPE_SIZE_KB} KB")

    start = time.perf_counter()
    try:
        lines = parse_lines(text)
        recipe = reduce_lines(
            text,
            lines,
            servings_key=cfg.SERVINGS_KEY,
            placeholders=cfg.placeholders,
        )
    except CooklangError as e:
        logger.error(f"Recipe parsing failed: {e}", extra={"recipe_size": len(text)})
        raise

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Parsed recipe: {len(lines)} lines, {len(recipe.metadata.ingredients)} ingredients, "
        f"{len(recipe.metadata.cookware)} cookware, {len(recipe.metadata.timer)} timers "
        f"in {elapsed_ms:.1f} ms",
        extra={"recipe_size": len(text)},
    )
    return recipe
