"""Tests for the Post model's derived properties."""

from datetime import date, datetime
from pathlib import Path

import pytest
from pydantic import ValidationError

from inkwell.posts.frontmatter import parse_frontmatter
from inkwell.posts.models import FrontMatter, Post, PostFilename, humanize_slug, parse_date

from tests.conftest import EMBER_POST, POSTGRES_POST, RAILS_POST


def _from_text(text: str, name: str, filename: PostFilename | None = None, **kwargs) -> Post:
    fm, body = parse_frontmatter(text, path=name)
    return Post(path=Path(name), filename=filename, front_matter=fm, body=body, **kwargs)


@pytest.fixture
def rails_post():
    return _from_text(
        RAILS_POST,
        "2017-05-28-decorator-pattern-in-rails.markdown",
        PostFilename(date=date(2017, 5, 28), slug="decorator-pattern-in-rails", extension="markdown"),
    )


class TestPostProperties:
    def test_identity(self, rails_post):
        assert rails_post.slug == "decorator-pattern-in-rails"
        assert rails_post.identifier == "2017-05-28-decorator-pattern-in-rails"
        assert rails_post.is_page is False

    def test_metadata(self, rails_post):
        assert rails_post.title == "Decorator Pattern in Rails: Beyond Draper"
        assert rails_post.date == datetime(2017, 5, 28, 19, 0)
        assert rails_post.layout == "post"
        assert rails_post.comments is True
        assert rails_post.categories == ["Ruby on Rails", "Design Patterns", "Ruby"]

    def test_excerpt(self, rails_post):
        assert rails_post.has_more is True
        assert rails_post.excerpt == "Decorators keep presentation logic out of your models."

    def test_code_blocks(self, rails_post):
        blocks = rails_post.code_blocks
        assert len(blocks) == 1
        assert blocks[0].language == "ruby"
        assert blocks[0].title == "app/decorators/user_decorator.rb"
        assert rails_post.languages == ["ruby"]

    def test_tight_more_marker(self):
        post = _from_text(EMBER_POST, "2018-02-11-ember-decorators.markdown")
        assert post.has_more is True
        assert post.languages == ["javascript"]

    def test_no_more_marker(self):
        post = _from_text(POSTGRES_POST, "2018-02-11-postgres-partitioning.markdown")
        assert post.has_more is False
        assert post.excerpt.startswith("Declarative partitioning")
        assert post.languages == ["sql"]

    def test_custom_separator(self):
        post = Post(path=Path("x.md"), body="Lead\n[cut]\nRest", excerpt_separator="[cut]")
        assert post.excerpt == "Lead"

    def test_excerpts_disabled(self):
        post = _from_text(RAILS_POST, "2017-05-28-decorator-pattern-in-rails.markdown", excerpt_separator="")
        assert post.has_more is False
        assert "And the view stays thin." in post.excerpt

    def test_first_paragraph_excerpt(self):
        post = _from_text(RAILS_POST, "2017-05-28-decorator-pattern-in-rails.markdown", excerpt_separator="\n\n")
        assert post.excerpt == "Decorators keep presentation logic out of your models."

    def test_title_falls_back_to_slug(self):
        post = Post(
            path=Path("2016-01-09-rails-service-objects.md"),
            filename=PostFilename(date=date(2016, 1, 9), slug="rails-service-objects", extension="md"),
            front_matter=FrontMatter(title="   "),
        )
        assert post.title == "Rails Service Objects"

    def test_date_falls_back_to_filename(self):
        post = Post(
            path=Path("2016-01-09-x.md"),
            filename=PostFilename(date=date(2016, 1, 9), slug="x", extension="md"),
        )
        assert post.date == datetime(2016, 1, 9)

    def test_front_matter_date_overrides_filename(self):
        post = Post(
            path=Path("2016-01-09-x.md"),
            filename=PostFilename(date=date(2016, 1, 9), slug="x", extension="md"),
            front_matter=FrontMatter(date=datetime(2016, 1, 10, 7, 0)),
        )
        assert post.date == datetime(2016, 1, 10, 7, 0)

    def test_front_matter_slug_overrides(self, rails_post):
        post = rails_post.model_copy(
            update={"front_matter": rails_post.front_matter.model_copy(update={"slug": "decorators"})}
        )
        assert post.slug == "decorators"

    def test_comments_unspecified_is_none(self):
        assert Post(path=Path("x.md")).comments is None

    def test_frozen(self, rails_post):
        with pytest.raises(ValidationError):
            rails_post.body = "changed"


class TestPages:
    def test_page_properties(self):
        page = Post(path=Path("about.markdown"), front_matter=FrontMatter(title="About"))
        assert page.is_page is True
        assert page.slug == "about"
        assert page.identifier == "about"
        assert page.date is None
        assert page.layout == "page"

    def test_page_sort_key_without_date(self):
        page = Post(path=Path("about.markdown"))
        assert page.sort_key == (datetime.min, "about")


class TestHelpers:
    def test_humanize_slug(self):
        assert humanize_slug("my-first_post") == "My First Post"

    def test_parse_date_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_date("yesterday")

    def test_parse_date_rejects_non_string(self):
        with pytest.raises(ValueError):
            parse_date(12345)
