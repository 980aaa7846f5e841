import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from themesync.rules.models import SchemaConfig

logger = logging.getLogger(__name__)

SCHEMA_ENV_VAR = "THEMESYNC_SCHEMA"
DEFAULT_SCHEMA_PATH = Path(__file__).with_name("default_schema.yaml")


def resolve_schema_path(path: Path | str | None = None) -> Path:
    """
    Pick the schema file: explicit path, then $THEMESYNC_SCHEMA, then the
    packaged default.
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(SCHEMA_ENV_VAR)
    if env_path:
        return Path(env_path)

    return DEFAULT_SCHEMA_PATH


def _extract_yaml(content: str) -> str:
    # Schema files may be Markdown documents with a fenced yaml block.
    lines = content.splitlines()
    yaml_lines = []
    in_block = False
    found_block = False

    for line in lines:
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break

        if in_block:
            yaml_lines.append(line)

    if found_block:
        return "\n".join(yaml_lines)
    return content


def load_schema(path: Path | str | None = None) -> SchemaConfig:
    """
    Load and validate the schema file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if the YAML or the schema is invalid.
    """
    schema_path = resolve_schema_path(path)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found at: {schema_path}")

    with open(schema_path, encoding="utf-8") as f:
        content = f.read()

    try:
        data = yaml.safe_load(_extract_yaml(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in schema file: {e}") from e

    try:
        config = SchemaConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Schema validation failed:\n{e}") from e

    logger.debug("Loaded schema from %s", schema_path)
    return config
