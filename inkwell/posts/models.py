"""Pydantic models for blog posts and their front matter."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inkwell.posts.body import (
    DEFAULT_EXCERPT_SEPARATOR,
    CodeBlock,
    extract_code_blocks,
    split_excerpt,
)

# Strings accepted for `date:` when YAML leaves them untyped.
_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
)

_KNOWN_KEYS = (
    "layout",
    "title",
    "date",
    "comments",
    "categories",
    "tags",
    "published",
    "permalink",
    "slug",
)


class PostError(Exception):
    """A post file could not be read or parsed."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")


class FrontMatterError(PostError):
    """Front matter is missing, malformed, or holds an unusable value."""


class FilenameError(PostError):
    """Filename does not follow the YYYY-MM-DD-slug.ext convention."""


@dataclass(frozen=True)
class PostFilename:
    """Publish date, slug and extension encoded in a post filename."""

    date: dt.date
    slug: str
    extension: str

    @property
    def stem(self) -> str:
        return f"{self.date.isoformat()}-{self.slug}"


def parse_date(value: Any) -> dt.datetime:
    """Coerce a front-matter date value to a datetime."""
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        for fmt in _DATE_FORMATS:
            try:
                return dt.datetime.strptime(text, fmt)
            except ValueError:
                continue
        try:
            return dt.datetime.fromisoformat(text)
        except ValueError:
            pass
    raise ValueError(f"unrecognised date: {value!r}")


def naive_utc(value: dt.datetime) -> dt.datetime:
    """Make aware and naive datetimes comparable."""
    if value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def _string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        # Jekyll splits a plain string on whitespace
        return value.split()
    if isinstance(value, (list, tuple, set)):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    return [str(value)]


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


class FrontMatter(BaseModel):
    """Typed view of a post's front matter.

    Keys beyond the well-known ones are kept verbatim in ``extra``.
    """

    layout: str | None = None
    title: str | None = None
    date: dt.datetime | None = None
    comments: bool | None = None
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    published: bool = True
    permalink: str | None = None
    slug: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("layout", "title", "permalink", "slug", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        if v is None:
            return None
        return str(v)

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        return parse_date(v)

    @field_validator("categories", "tags", mode="before")
    @classmethod
    def _coerce_list(cls, v: Any) -> list[str]:
        return _dedupe(_string_list(v))

    @field_validator("published", mode="before")
    @classmethod
    def _default_published(cls, v: Any) -> Any:
        return True if v is None else v

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> FrontMatter:
        """Build from a parsed YAML mapping, folding `category` into `categories`."""
        known: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in data.items():
            key = str(key)
            if key in _KNOWN_KEYS:
                known[key] = value
            elif key != "category":
                extra[key] = value
        if "category" in data:
            known["categories"] = _string_list(data["category"]) + _string_list(
                known.get("categories")
            )
        return cls(**known, extra=extra)

    def to_mapping(self) -> dict[str, Any]:
        """Ordered mapping suitable for dumping back to YAML."""
        out: dict[str, Any] = {}
        if self.layout is not None:
            out["layout"] = self.layout
        if self.title is not None:
            out["title"] = self.title
        if self.date is not None:
            out["date"] = _format_date(self.date)
        if self.comments is not None:
            out["comments"] = self.comments
        if self.categories:
            out["categories"] = list(self.categories)
        if self.tags:
            out["tags"] = list(self.tags)
        if not self.published:
            out["published"] = False
        if self.permalink is not None:
            out["permalink"] = self.permalink
        if self.slug is not None:
            out["slug"] = self.slug
        out.update(self.extra)
        return out


def _format_date(value: dt.datetime) -> str:
    if value.tzinfo is not None:
        return value.strftime("%Y-%m-%d %H:%M:%S %z")
    if value.second:
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return value.strftime("%Y-%m-%d %H:%M")


def _stem(name: str) -> str:
    return name.split(".", 1)[0] if not name.startswith(".") else name


def humanize_slug(slug: str) -> str:
    """my-first-post -> My First Post"""
    return " ".join(word.capitalize() for word in slug.replace("_", "-").split("-") if word)


class Post(BaseModel):
    """A single Markdown document with front matter.

    Dated documents (filename ``YYYY-MM-DD-slug.ext``) are posts; undated
    ones such as ``about.markdown`` are pages.

    ``rel_path`` is a page's location under the site source, when known.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    filename: PostFilename | None = None
    rel_path: Path | None = None
    front_matter: FrontMatter = Field(default_factory=FrontMatter)
    body: str = ""
    excerpt_separator: str = DEFAULT_EXCERPT_SEPARATOR

    @property
    def is_page(self) -> bool:
        return self.filename is None

    @property
    def slug(self) -> str:
        if self.front_matter.slug:
            return self.front_matter.slug
        if self.filename is not None:
            return self.filename.slug
        stem = _stem(self.path.name)
        if stem == "index":
            # about/index.markdown is the About page
            parent = (self.rel_path or self.path).parent.name
            if parent:
                return parent
        return stem

    @property
    def identifier(self) -> str:
        if self.filename is not None:
            return self.filename.stem
        return self.slug

    @property
    def title(self) -> str:
        title = (self.front_matter.title or "").strip()
        return title or humanize_slug(self.slug)

    @property
    def date(self) -> dt.datetime | None:
        if self.front_matter.date is not None:
            return self.front_matter.date
        if self.filename is not None:
            d = self.filename.date
            return dt.datetime(d.year, d.month, d.day)
        return None

    @property
    def sort_key(self) -> tuple[dt.datetime, str]:
        return naive_utc(self.date or dt.datetime.min), self.slug

    @property
    def layout(self) -> str:
        if self.front_matter.layout:
            return self.front_matter.layout
        return "page" if self.is_page else "post"

    @property
    def categories(self) -> list[str]:
        return list(self.front_matter.categories)

    @property
    def tags(self) -> list[str]:
        return list(self.front_matter.tags)

    @property
    def comments(self) -> bool | None:
        return self.front_matter.comments

    @property
    def published(self) -> bool:
        return self.front_matter.published

    @property
    def excerpt(self) -> str:
        return split_excerpt(self.body, self.excerpt_separator)[0]

    @property
    def has_more(self) -> bool:
        return split_excerpt(self.body, self.excerpt_separator)[1]

    @property
    def code_blocks(self) -> list[CodeBlock]:
        return extract_code_blocks(self.body)

    @property
    def languages(self) -> list[str]:
        return _dedupe([b.language for b in self.code_blocks if b.language])
