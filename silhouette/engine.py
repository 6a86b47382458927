"""
Public entry point of the template engine.

    engine = TemplateEngine(globals=to_object({"site": "example.org"}))
    template = engine.compile("Hello {{ name }} from {{ site }}!")
    text = await template.render(to_object({"name": "Ada"}))
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .nodes import Statement
from .parser import parse_template
from .renderer import TemplateRenderer
from .values import ObjectValue, to_object

logger = logging.getLogger(__name__)

ContextLike = Union[ObjectValue, Mapping[str, Any], None]


def default_globals() -> ObjectValue:
    """Globals available to every template unless disabled. Currently none."""
    return ObjectValue()


@dataclass(frozen=True)
class CompiledTemplate:
    """
    Compiled, immutable template.

    Safe to render any number of times, concurrently included.
    """
    source: str
    statement: Statement
    renderer: TemplateRenderer

    async def render(self, context: ContextLike = None) -> str:
        """
        Renders the template against ``context``.

        Context values shadow engine globals of the same name. A plain
        mapping is converted with ``to_object`` first.
        """
        return await self.renderer.render(self.statement, _coerce_context(context))

    def render_sync(self, context: ContextLike = None) -> str:
        """Runs ``render`` on a fresh event loop; not for use inside a running loop."""
        return asyncio.run(self.render(context))


class TemplateEngine:
    """
    Compiles template sources against a fixed set of globals.
    """

    def __init__(self, globals: ContextLike = None, include_default_globals: bool = True):
        merged = default_globals() if include_default_globals else ObjectValue()
        user_globals = _coerce_context(globals)
        if user_globals is not None:
            merged = merged.merged(user_globals)

        self.globals = merged
        self._renderer = TemplateRenderer(merged)

    def compile(self, source: str) -> CompiledTemplate:
        """
        Compiles template source text.

        Raises:
            ParseError: On the first syntax error
        """
        statement = parse_template(source)
        logger.debug(f"Compiled template of {len(source)} characters")
        return CompiledTemplate(source, statement, self._renderer)

    async def render(self, source: str, context: ContextLike = None) -> str:
        """Compiles and renders in one step."""
        return await self.compile(source).render(context)


def _coerce_context(context: ContextLike) -> Optional[ObjectValue]:
    if context is None or isinstance(context, ObjectValue):
        return context
    return to_object(context)


__all__ = ["TemplateEngine", "CompiledTemplate", "default_globals"]
