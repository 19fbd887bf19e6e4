"""
Technology dispatch for code generation.

A category engine owns an ordered list of routes. The first route whose key
matches the lower-cased technology wins; when nothing matches the terminal
fallback route is used.

codeintel/src/codeintel/engines/dispatch.py
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..comments import CommentStyle
from ..exceptions import UnsupportedTechnologyError
from ..templates import Generator

logger = logging.getLogger(__name__)

__all__ = ["TechnologyRoute", "TechnologyDispatch"]


@dataclass(frozen=True)
class TechnologyRoute:
    """One technology family and the generator that serves it.

    Keys match as substrings of the technology, except when `word_match` is
    set: then each key must appear as a whole word ("go" must not match
    "mongo" or "django").
    """

    name: str
    keys: Tuple[str, ...]
    generator: Generator
    comment_style: CommentStyle
    word_match: bool = False

    def matches(self, technology: str) -> bool:
        tech = technology.lower()
        if self.word_match:
            return any(re.search(r"(?<![\w.#])%s(?![\w#])" % re.escape(key), tech) for key in self.keys)
        return any(key in tech for key in self.keys)


class TechnologyDispatch:
    """Ordered routes with an optional terminal fallback."""

    def __init__(
        self,
        routes: Sequence[TechnologyRoute],
        fallback: Optional[TechnologyRoute] = None,
        table: str = "",
    ):
        self.routes = tuple(routes)
        self.fallback = fallback
        self.table = table

    def resolve(self, technology: str) -> TechnologyRoute:
        for route in self.routes:
            if route.matches(technology):
                logger.debug("Technology '%s' routed to %s (%s)", technology, route.name, self.table)
                return route
        if self.fallback is None:
            raise UnsupportedTechnologyError(technology, self.table)
        logger.debug("Technology '%s' using %s fallback (%s)", technology, self.fallback.name, self.table)
        return self.fallback

    def route_names(self) -> Tuple[str, ...]:
        names = tuple(route.name for route in self.routes)
        if self.fallback is not None:
            names += (self.fallback.name,)
        return names
