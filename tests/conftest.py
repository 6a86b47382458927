from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from silhouette import TemplateEngine, to_object


@pytest.fixture
def engine() -> TemplateEngine:
    return TemplateEngine()


@pytest.fixture
def render(engine: TemplateEngine):
    """Компилирует и рендерит шаблон с контекстом из keyword-аргументов."""
    async def _render(source: str, **context: Any) -> str:
        return await engine.compile(source).render(to_object(context))
    return _render


@pytest.fixture
def write_file(tmp_path: Path):
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write
