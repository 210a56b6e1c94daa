"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import InkwellConfig

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def _config_candidates(cli_path: str | None = None) -> list[Path]:
    """Config files in the order they are tried."""
    candidates = [Path("_config.yml"), Path.home() / ".inkwell" / "config.yaml"]
    if cli_path:
        candidates.insert(0, Path(cli_path))
    return candidates


def load_config(cli_path: str | None = None) -> InkwellConfig:
    """Load config with resolution order: CLI > site _config.yml > user-global > defaults.

    An empty file is skipped in favour of the next candidate.
    """
    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in _config_candidates(cli_path):
        if not path.is_file():
            continue
        raw = _read_mapping(path)
        if raw is None:
            continue
        try:
            return InkwellConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e

    return InkwellConfig()


def _read_mapping(path: Path) -> dict | None:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping, got {type(raw).__name__}")
    return raw


def _expand_env_vars(obj: object) -> object:
    """Replace ${VAR} in every string value; unset variables become ""."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    if isinstance(obj, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    return obj


# Default YAML template for `inkwell config init`
DEFAULT_CONFIG_TEMPLATE = """\
# _config.yml

# Site
title: "My Blog"
url: "https://example.com"
baseurl: ""                    # subpath of the site, e.g. /blog
author:
  name: "Your Name"
  # email: you@example.com

# Posts
permalink: /blog/:year/:month/:day/:title/   # date | pretty | ordinal | none | custom pattern
excerpt_separator: "<!-- more -->"
excerpt_link: "Read on &rarr;"
comments: true
posts_dir: _posts
future: false                  # include posts dated in the future
unpublished: false             # include posts with `published: false`

pagination:
  per_page: 10

exclude:
  - vendor/
  - node_modules/

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
