from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

from .engine import TemplateEngine
from .errors import SilhouetteError
from .frontmatter import load_yaml_mapping, parse_frontmatter
from .scanner import scan_template
from .values import to_object
from .version import tool_version
from .whitespace import process_whitespace

_LOG = logging.getLogger("silhouette")


def _setup_logging(debug: bool) -> None:
    level = logging.DEBUG if debug or os.environ.get("SILHOUETTE_DEBUG") else logging.WARNING
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(message)s")
        h.setFormatter(fmt)
        _LOG.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="silhouette",
        description="Silhouette template renderer",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--debug", action="store_true", help="подробный лог в stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Отрендерить шаблон в stdout")
    sp_render.add_argument("file", help="файл шаблона (может начинаться с YAML frontmatter)")
    sp_render.add_argument(
        "--context",
        metavar="FILE",
        help="YAML или JSON файл с контекстом (перекрывает frontmatter)",
    )
    sp_render.add_argument(
        "--var",
        action="append",
        metavar="NAME=VALUE",
        help="строковая переменная контекста (можно указать несколько)",
    )

    sp_tokens = sub.add_parser("tokens", help="Поток токенов шаблона (JSON)")
    sp_tokens.add_argument("file", help="файл шаблона")

    return p


def _parse_vars(pairs: List[str] | None) -> Dict[str, str]:
    """Парсит список 'name=value' в словарь."""
    result: Dict[str, str] = {}
    if not pairs:
        return result

    for pair in pairs:
        if "=" not in pair:
            raise SilhouetteError(f"Invalid --var format '{pair}'. Expected 'name=value'")
        name, value = pair.split("=", 1)
        result[name.strip()] = value

    return result


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise SilhouetteError(f"Cannot read {path}: {e}") from e


def _render(ns: argparse.Namespace) -> str:
    data, body = parse_frontmatter(_read_text(Path(ns.file)))

    context: Dict[str, Any] = dict(data or {})
    if ns.context:
        context.update(load_yaml_mapping(Path(ns.context)))
    context.update(_parse_vars(ns.var))

    template = TemplateEngine().compile(body)
    return template.render_sync(to_object(context, nested_objects=True))


def _tokens(ns: argparse.Namespace) -> List[Dict[str, Any]]:
    _, body = parse_frontmatter(_read_text(Path(ns.file)))
    return [
        {
            "type": token.type.name,
            "value": token.value,
            "line": token.location.line,
            "column": token.location.column,
            "offset": token.location.offset,
            "length": token.location.length,
        }
        for token in process_whitespace(scan_template(body))
    ]


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.debug)

    try:
        if ns.cmd == "render":
            sys.stdout.write(_render(ns))
            return 0

        if ns.cmd == "tokens":
            sys.stdout.write(json.dumps(_tokens(ns), ensure_ascii=False, indent=2) + "\n")
            return 0

    except SilhouetteError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
