"""Permalink expansion for Jekyll-style patterns such as /blog/:year/:month/:day/:title/."""

from __future__ import annotations

import re

from inkwell.config.models import InkwellConfig
from inkwell.posts.filename import slugify
from inkwell.posts.models import Post

BUILTIN_STYLES: dict[str, str] = {
    "date": "/:categories/:year/:month/:day/:title:output_ext",
    "pretty": "/:categories/:year/:month/:day/:title/",
    "ordinal": "/:categories/:year/:y_day/:title:output_ext",
    "none": "/:categories/:title:output_ext",
}

OUTPUT_EXT = ".html"

_PLACEHOLDER_RE = re.compile(r":([a-z_]+)")
_SLASHES_RE = re.compile(r"/{2,}")


def resolve_pattern(pattern: str) -> str:
    return BUILTIN_STYLES.get(pattern, pattern)


def expand_permalink(post: Post, pattern: str = "date") -> str:
    """Return the site-relative URL for a post.

    A `permalink:` in the post's front matter wins over the pattern.
    Pages use their directory under the source plus /:slug/
    """
    if post.front_matter.permalink:
        return _normalize(post.front_matter.permalink)
    if post.is_page:
        return _normalize(_page_url(post))

    values = _placeholder_values(post)

    def _sub(m: re.Match) -> str:
        # Unknown placeholders are left as written
        return values.get(m.group(1), m.group(0))

    return _normalize(_PLACEHOLDER_RE.sub(_sub, resolve_pattern(pattern)))


def absolute_url(config: InkwellConfig, path: str) -> str:
    """Join site url, baseurl and a site-relative path."""
    base = config.url.rstrip("/")
    prefix = config.baseurl.strip("/")
    if prefix:
        base = f"{base}/{prefix}"
    return base + "/" + path.lstrip("/")


def _placeholder_values(post: Post) -> dict[str, str]:
    when = post.date
    if when is None:
        raise ValueError(f"Post {post.identifier!r} has no date")
    return {
        "year": f"{when.year:04d}",
        "short_year": f"{when.year % 100:02d}",
        "month": f"{when.month:02d}",
        "i_month": str(when.month),
        "day": f"{when.day:02d}",
        "i_day": str(when.day),
        "y_day": f"{when.timetuple().tm_yday:03d}",
        "hour": f"{when.hour:02d}",
        "minute": f"{when.minute:02d}",
        "second": f"{when.second:02d}",
        "title": post.slug,
        "slug": post.slug,
        "categories": "/".join(s for s in (slugify(c) for c in post.categories) if s),
        "output_ext": OUTPUT_EXT,
    }


def _page_url(post: Post) -> str:
    """Directory of the page under the source, then its slug.

    ``index`` files name their directory: talks/index.md -> /talks/.
    """
    rel = post.rel_path
    if rel is None:
        return f"/{post.slug}/"
    parts = [part for part in rel.parent.as_posix().split("/") if part not in ("", ".")]
    if post.front_matter.slug or rel.name.split(".", 1)[0] != "index":
        parts.append(post.slug)
    return "/" + "/".join(parts) + "/"


def _normalize(url: str) -> str:
    url = _SLASHES_RE.sub("/", url)
    if not url.startswith("/"):
        url = "/" + url
    return url
