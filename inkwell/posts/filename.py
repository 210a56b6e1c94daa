"""Post filename convention: YYYY-MM-DD-slug.extension."""

from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime
from pathlib import Path

from inkwell.posts.models import FilenameError, PostFilename

_FILENAME_RE = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})-(?P<slug>.+)\.(?P<ext>[A-Za-z0-9]+)$"
)
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def parse_post_filename(name: str | Path) -> PostFilename:
    """Split a post filename into date, slug and extension.

    Accepts a bare name or a path; only the final component is inspected.
    """
    base = Path(name).name
    m = _FILENAME_RE.match(base)
    if not m:
        raise FilenameError(name, "expected YYYY-MM-DD-slug.extension")
    try:
        published = date(int(m.group("year")), int(m.group("month")), int(m.group("day")))
    except ValueError as exc:
        raise FilenameError(name, f"invalid date in filename: {exc}") from exc
    slug = m.group("slug").strip()
    if not slug:
        raise FilenameError(name, "empty slug")
    return PostFilename(date=published, slug=slug, extension=m.group("ext"))


def is_post_filename(name: str | Path) -> bool:
    try:
        parse_post_filename(name)
    except FilenameError:
        return False
    return True


def slugify(text: str) -> str:
    """Lowercase, ASCII-folded, hyphen-separated slug.

    "Decorator Pattern & Rails" -> "decorator-pattern-rails"
    """
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM_RE.sub("-", folded.lower()).strip("-")


def post_filename(published: date | datetime, title: str, extension: str = "markdown") -> str:
    """Build the canonical filename for a post."""
    slug = slugify(title)
    if not slug:
        raise ValueError(f"Cannot derive a slug from title {title!r}")
    if isinstance(published, datetime):
        published = published.date()
    return f"{published.isoformat()}-{slug}.{extension.lstrip('.')}"
