from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal


class AuthorConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    email: str | None = None
    url: str | None = None


class PaginationConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    per_page: int = Field(default=10, gt=0)
    sort_field: str = "date"
    sort_reverse: bool = True


class InkwellConfig(BaseModel):
    """Site settings read from a Jekyll-style _config.yml plus tool settings.

    Unknown keys are ignored so an unmodified Jekyll config loads.
    """

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    url: str = ""
    baseurl: str = ""
    author: AuthorConfig = Field(default_factory=AuthorConfig)
    permalink: str = "date"
    excerpt_separator: str = "<!-- more -->"
    excerpt_link: str = "Read on &rarr;"
    comments: bool = False
    exclude: list[str] = Field(default_factory=list)
    source: str = "."
    posts_dir: str = "_posts"
    markdown_ext: list[str] = Field(
        default_factory=lambda: ["markdown", "mkdown", "mkdn", "mkd", "md"]
    )
    future: bool = False
    unpublished: bool = False
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"

    @field_validator("author", mode="before")
    @classmethod
    def _author_from_string(cls, v: object) -> object:
        if isinstance(v, str):
            return {"name": v}
        return v if v is not None else {}

    @field_validator("markdown_ext", mode="before")
    @classmethod
    def _split_markdown_ext(cls, v: object) -> object:
        # Jekyll writes this as "markdown,mkdown,md"
        if isinstance(v, str):
            return [ext.strip().lstrip(".") for ext in v.split(",") if ext.strip()]
        return v

    @field_validator("exclude", mode="before")
    @classmethod
    def _none_to_list(cls, v: object) -> object:
        return v if v is not None else []

    @field_validator("excerpt_separator", mode="before")
    @classmethod
    def _none_separator(cls, v: object) -> object:
        # "" disables excerpts; "\n\n" (first paragraph) is matched literally
        return "" if v is None else v
