"""
Technology code generators.

Each generator is a pure function of a TemplateContext returning source
text. Templates are plain strings with __NAME__ placeholders filled by
render(); every value is escaped for its position before substitution.

codeintel/src/codeintel/templates/__init__.py
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from ..comments import CommentStyle, header_block, identifier, snake_identifier

__all__ = ["TemplateContext", "Generator", "render"]


@dataclass(frozen=True)
class TemplateContext:
    """Everything a generator needs to produce one artifact."""

    feature: str
    technology: str
    engine_name: str
    style: CommentStyle
    role: Optional[str] = None

    def header(self) -> str:
        return header_block(self.style, self.feature, self.engine_name, self.technology, self.role)

    @property
    def class_name(self) -> str:
        return identifier(self.feature)

    @property
    def table_name(self) -> str:
        return snake_identifier(self.feature)


Generator = Callable[[TemplateContext], str]


def render(template: str, **values: str) -> str:
    """Substitute __KEY__ placeholders with the given values in a single pass."""
    if not values:
        return template
    pattern = re.compile("__(%s)__" % "|".join(re.escape(key.upper()) for key in values))
    return pattern.sub(lambda match: values[match.group(1).lower()], template)
