"""
Silhouette: компактный язык шаблонов.

Шаблон компилируется один раз (TemplateEngine.compile) и затем
рендерится асинхронно против произвольного контекста.
"""

from __future__ import annotations

from .engine import CompiledTemplate, TemplateEngine
from .errors import (
    FrontmatterError,
    ParseError,
    SilhouetteError,
    UndefinedVariableError,
    UnknownKeyError,
    UnknownPropertyError,
)
from .values import to_object, to_value

__all__ = [
    "TemplateEngine",
    "CompiledTemplate",
    "SilhouetteError",
    "ParseError",
    "UnknownPropertyError",
    "UnknownKeyError",
    "UndefinedVariableError",
    "FrontmatterError",
    "to_object",
    "to_value",
]
