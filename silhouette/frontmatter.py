"""
Frontmatter parser for template files.

A template file may start with a YAML mapping between two ``---`` lines.
The mapping becomes the render context; the rest of the file is the
template source.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import FrontmatterError, SilhouetteError
from .values import ObjectValue, to_object

_yaml = YAML(typ="safe")

# Pattern for YAML frontmatter: starts with ---, ends with ---
_FRONTMATTER_PATTERN = re.compile(
    r'^---\s*\n(.*?)\n---\s*\n?',
    re.DOTALL
)


def parse_frontmatter(text: str) -> Tuple[Optional[Dict[str, Any]], str]:
    """
    Parse YAML frontmatter from template file text.

    Args:
        text: Full text of the template file

    Returns:
        Tuple of (data, remaining_text):
        - data: Parsed mapping ({} for empty frontmatter) or None if the
          text has no frontmatter
        - remaining_text: Text with frontmatter removed

    Raises:
        FrontmatterError: If the frontmatter is not valid YAML or not a mapping

    Examples:
        >>> data, body = parse_frontmatter("---\\nname: Ada\\n---\\nHi {{ name }}")
        >>> data
        {'name': 'Ada'}
        >>> body
        'Hi {{ name }}'
    """
    if not text.startswith('---'):
        return None, text

    match = _FRONTMATTER_PATTERN.match(text)
    if not match:
        # Starts with --- but no closing ---, treat as no frontmatter
        return None, text

    yaml_content = match.group(1)
    remaining_text = text[match.end():]

    try:
        data = _yaml.load(yaml_content)
    except YAMLError as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e

    if data is None:
        return {}, remaining_text
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Frontmatter must be a mapping, got {type(data).__name__}"
        )
    return data, remaining_text


def load_yaml_mapping(path: Path) -> Dict[str, Any]:
    """
    Load a YAML (or JSON) file that must contain a mapping.

    Raises:
        SilhouetteError: If the file cannot be read or parsed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SilhouetteError(f"Cannot read {path}: {e}") from e

    try:
        data = _yaml.load(text)
    except YAMLError as e:
        raise SilhouetteError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SilhouetteError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def load_template_file(path: Path) -> Tuple[ObjectValue, str]:
    """
    Read a template file and split it into context and template body.

    Returns:
        Tuple of (context, body); the context is empty when the file has
        no frontmatter. Nested mappings become objects.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise SilhouetteError(f"Cannot read template {path}: {e}") from e

    data, body = parse_frontmatter(text)
    return to_object(data or {}, nested_objects=True), body


__all__ = [
    "parse_frontmatter",
    "load_yaml_mapping",
    "load_template_file",
]
