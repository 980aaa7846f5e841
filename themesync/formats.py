"""
Artifact serialization formats.

``json`` and ``yaml`` write the artifact mapping as-is; ``js`` wraps the JSON
in an ES module default export, like a hand-written ``design-tokens.js``.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any

import yaml

_JS_PREFIX = "export default "
_JS_EXPORT = re.compile(r"^\s*export\s+default\s+(?P<body>.*?);?\s*$", re.S)


class ArtifactFormat(str, Enum):
    """Supported artifact formats."""

    JSON = "json"
    YAML = "yaml"
    JS = "js"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def from_extension(cls, suffix: str) -> ArtifactFormat | None:
        suffix = suffix.lower().lstrip(".")
        if suffix == "yml":
            return cls.YAML
        for fmt in cls:
            if fmt.value == suffix:
                return fmt
        return None


def render(data: dict[str, Any], fmt: ArtifactFormat) -> str:
    """Serialize an artifact mapping."""
    if fmt is ArtifactFormat.JSON:
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if fmt is ArtifactFormat.YAML:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return _JS_PREFIX + json.dumps(data, indent=2, ensure_ascii=False) + ";\n"


def parse(text: str, fmt: ArtifactFormat) -> Any:
    """
    Parse a serialized artifact.

    Raises ValueError on malformed content.
    """
    if fmt is ArtifactFormat.YAML:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML: {e}") from e

    if fmt is ArtifactFormat.JS:
        match = _JS_EXPORT.match(text)
        if match is None:
            raise ValueError("Expected an 'export default {...};' module")
        text = match.group("body")

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e
