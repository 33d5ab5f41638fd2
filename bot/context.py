from __future__ import annotations

import logging
from pathlib import Path


logger = logging.getLogger("satbot")

NO_CONTEXT = "No context available"


def load_context(path: str | Path) -> str:
    """Read the reference document injected into every prompt.

    A missing, unreadable or blank file degrades to ``NO_CONTEXT`` so the
    service can still start.
    """
    try:
        content = Path(path).read_text(encoding="utf-8").strip()
    except OSError as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return NO_CONTEXT

    if not content:
        logger.warning("%s is empty, using placeholder context", path)
        return NO_CONTEXT

    logger.info("Context loaded from %s (%s chars)", path, len(content))
    return content
