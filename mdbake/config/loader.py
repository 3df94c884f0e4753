"""Locate, read and validate mdbake.yaml."""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import MdBakeConfig

logger = logging.getLogger(__name__)

_ENV_REF = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def config_search_paths(cli_path: str | None = None) -> list[Path]:
    """Candidate config files, highest precedence first."""
    paths = [Path("./mdbake.yaml"), Path.home() / ".mdbake" / "config.yaml"]
    if cli_path:
        paths.insert(0, Path(cli_path))
    return paths


def load_config(cli_path: str | None = None) -> MdBakeConfig:
    """Return the first non-empty config found, or the defaults.

    Order: ``--config`` path, ``./mdbake.yaml``, ``~/.mdbake/config.yaml``.
    Errors are raised as ``ValueError`` naming the file and, for schema
    problems, the dotted key that failed.
    """
    for path in config_search_paths(cli_path):
        if not path.exists():
            continue
        try:
            with open(path, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if raw is None:
            logger.debug("Skipping empty config %s", path)
            continue
        if not isinstance(raw, dict):
            raise ValueError(
                f"Invalid config in {path}: expected a mapping at the top level, "
                f"got {type(raw).__name__}"
            )
        try:
            config = MdBakeConfig(**_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}:\n{_describe_errors(e)}") from e
        logger.debug("Loaded config from %s", path)
        return config

    return MdBakeConfig()


def _describe_errors(error: ValidationError) -> str:
    """One ``key.path: message`` line per validation failure."""
    lines = []
    for item in error.errors():
        key = ".".join(str(part) for part in item["loc"]) or "<root>"
        lines.append(f"  {key}: {item['msg']}")
    return "\n".join(lines)


def _expand_env_vars(obj: object, key: str = "") -> object:
    """Expand ``${VAR}`` and ``${VAR:-default}`` in string values.

    An unset variable without a default expands to an empty string and is
    logged with the key it appeared under.
    """
    if isinstance(obj, str):

        def _sub(m: re.Match) -> str:
            name, default = m.group(1), m.group(2)
            if name in os.environ:
                return os.environ[name]
            if default is None:
                logger.warning("Config key %s: ${%s} is not set", key or "<root>", name)
                return ""
            return default

        return _ENV_REF.sub(_sub, obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v, f"{key}.{k}" if key else str(k)) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v, f"{key}[{i}]") for i, v in enumerate(obj)]
    return obj


# Default YAML template for `mdbake config init`
DEFAULT_CONFIG_TEMPLATE = """\
# mdbake.yaml

# Rendering
render:
  markdown_extensions: [".md"]
  html_extension: ".html"
  extensions: ["fenced_code", "tables"]   # Python-Markdown extensions
  image_base: "document"                  # document | cwd
  inline_images: true

# Output
output:
  atomic_write: true           # write to a temp file, then rename
  encoding: "utf-8"

# Processing
processing:
  strict: true                 # stop at the first unreadable/unwritable document

# Watch mode
watch:
  debounce_seconds: 1.0

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
