"""Ordering directives embedded in primary key column comments.

A directive lets a schema declare that a parent table is created before its
children without the generator having to read foreign keys:

    id BIGINT PRIMARY KEY COMMENT 'modelgen:1'

Tables without a directive sort at order 0.
"""

import re
from logging import getLogger

logger = getLogger(__name__)

DIRECTIVE_PREFIX = "modelgen"
DEFAULT_ORDER = 0

DIRECTIVE = re.compile(rf"{DIRECTIVE_PREFIX}:\s*([+-]?\d+)")


def parse_order(comment: str | None, table: str = "") -> int:
    """Return the ordering key declared by a column comment."""
    text = (comment or "").strip()
    if not text.startswith(DIRECTIVE_PREFIX):
        logger.debug("No ordering directive on %s, using order %d", table, DEFAULT_ORDER)
        return DEFAULT_ORDER

    if match := DIRECTIVE.fullmatch(text):
        return int(match[1])

    logger.warning(
        "Could not parse ordering directive %r on %s, "
        "expected '%s:<integer>'; using order %d",
        text,
        table,
        DIRECTIVE_PREFIX,
        DEFAULT_ORDER,
    )
    return DEFAULT_ORDER
