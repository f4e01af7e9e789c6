"""
picking one environment for a free-text query.

candidates are scored in tiers and the first tier with a hit decides:

1. a name equal to the query (case-sensitive)
2. a path equal to the query
3. a name containing the query, shortest name first
4. a path containing the query, shortest path first
5. the closest name by `difflib.SequenceMatcher` ratio, provided it reaches
   the cutoff

ties inside a tier go to the earlier candidate, so the result only depends on
the candidate order and the query.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from difflib import SequenceMatcher
from pathlib import Path
from typing import Final

from .models import EnvironmentDescriptor

logger = logging.getLogger(__name__)

# same default as difflib.get_close_matches
DEFAULT_CUTOFF: Final[float] = 0.6


def similarity(query: str, name: str) -> float:
    """
    compute how alike two names are, ignoring case.

    returns: `float`
        ratio between 0.0 and 1.0
    """
    return SequenceMatcher(None, query.lower(), name.lower()).ratio()


def best_match(
    candidates: Sequence[EnvironmentDescriptor],
    query: str,
    cutoff: float = DEFAULT_CUTOFF,
) -> EnvironmentDescriptor | None:
    """
    return the candidate that best corresponds to a name or path fragment.

    arguments:
        `candidates: Sequence[EnvironmentDescriptor]`
            environments to choose from, in precedence order
        `query: str`
            environment name, path, or fragment of either
        `cutoff: float`
            minimum similarity for the fuzzy fallback

    returns: `EnvironmentDescriptor | None`
        the chosen candidate, or none when nothing is close enough
    """
    if not query or not candidates:
        return None

    for candidate in candidates:
        if candidate.name == query:
            return candidate

    query_path = Path(query).expanduser()
    for candidate in candidates:
        if candidate.path is not None and candidate.path == query_path:
            return candidate

    # min keeps the first of equally short candidates
    if in_name := [c for c in candidates if query in c.name]:
        return min(in_name, key=lambda c: len(c.name))

    if in_path := [c for c in candidates if c.path is not None and query in str(c.path)]:
        return min(in_path, key=lambda c: len(str(c.path)))

    best: EnvironmentDescriptor | None = None
    best_ratio = 0.0
    for candidate in candidates:
        ratio = similarity(query, candidate.name)
        if ratio > best_ratio:
            best, best_ratio = candidate, ratio

    if best is None or best_ratio < cutoff:
        logger.debug("no environment close to '%s' (best ratio %.2f)", query, best_ratio)
        return None

    logger.debug("fuzzy matched '%s' to '%s' (ratio %.2f)", query, best.name, best_ratio)
    return best
