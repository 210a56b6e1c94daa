"""YAML front matter splitting, parsing and dumping."""

from __future__ import annotations

import re

import yaml
from pydantic import ValidationError

from inkwell.posts.models import FrontMatter, FrontMatterError

# Opening `---` on the first line, closing `---` or `...` on a line of its own.
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<yaml>.*?)^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Split a document into its front matter block and body.

    Returns (yaml_str, body). yaml_str is None if no front matter found.
    """
    text = text.lstrip("\ufeff")
    m = _FRONTMATTER_RE.match(text)
    if not m:
        return None, text
    return m.group("yaml"), text[m.end():]


def parse_frontmatter(text: str, path: str = "<string>") -> tuple[FrontMatter, str]:
    """Parse a document into (FrontMatter, body).

    Raises FrontMatterError when the block is missing, not valid YAML,
    not a mapping, or holds a value that cannot be coerced.
    """
    yaml_str, body = split_frontmatter(text)
    if yaml_str is None:
        raise FrontMatterError(path, "No front matter found (missing --- markers)")

    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as exc:
        raise FrontMatterError(path, f"YAML parse error: {exc}") from exc
    except ValueError as exc:
        # Impossible timestamps such as 2017-13-45 fail inside the YAML constructor
        raise FrontMatterError(path, f"Invalid YAML value: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            path, f"Front matter is not a mapping, got {type(data).__name__}"
        )

    try:
        front_matter = FrontMatter.from_mapping(data)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
        raise FrontMatterError(path, f"Invalid front matter value ({fields})") from exc

    return front_matter, body


def dump_frontmatter(front_matter: FrontMatter) -> str:
    """Render a front matter block, delimiters included."""
    data = front_matter.to_mapping()
    if not data:
        return "---\n---\n"
    dumped = yaml.safe_dump(
        data, default_flow_style=False, sort_keys=False, allow_unicode=True, width=1000
    )
    return f"---\n{dumped}---\n"
