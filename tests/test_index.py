"""Tests for PostIndex ordering, grouping and pagination."""

from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

from inkwell.collection.index import PostIndex
from inkwell.collection.loader import PostLoader
from inkwell.posts.models import FrontMatter, Post, PostFilename


def _post(stem: str, categories=None, when: datetime | None = None) -> Post:
    y, m, d, slug = stem[:4], stem[5:7], stem[8:10], stem[11:]
    return Post(
        path=Path(f"_posts/{stem}.md"),
        filename=PostFilename(date=date(int(y), int(m), int(d)), slug=slug, extension="md"),
        front_matter=FrontMatter(categories=categories or [], date=when),
    )


@pytest.fixture
def index():
    return PostIndex([
        _post("2016-03-01-service-objects", ["Ruby on Rails", "Architecture"]),
        _post("2018-02-11-partitioning", ["PostgreSQL", "Ruby on Rails"], datetime(2018, 2, 11, 8, 0)),
        _post("2018-02-11-ember-decorators", ["Ember", "JavaScript"], datetime(2018, 2, 11, 10, 30)),
        _post("2017-05-28-decorators", ["Ruby on Rails", "Design Patterns"]),
        _post("2017-01-15-form-objects", ["Architecture", "ruby on rails"]),
    ])


class TestOrdering:
    def test_newest_first(self, index):
        assert [p.slug for p in index] == [
            "ember-decorators",
            "partitioning",
            "decorators",
            "form-objects",
            "service-objects",
        ]

    def test_same_date_tie_broken_by_slug(self):
        idx = PostIndex([_post("2018-01-01-b"), _post("2018-01-01-a")])
        assert [p.slug for p in idx] == ["a", "b"]

    def test_mixed_naive_and_aware_dates(self):
        aware = datetime(2018, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        idx = PostIndex([
            _post("2018-01-01-aware", when=aware),
            _post("2018-01-01-naive", when=datetime(2018, 1, 1, 11, 0)),
        ])
        assert [p.slug for p in idx] == ["naive", "aware"]

    def test_len_and_all(self, index):
        assert len(index) == 5
        assert index.all() is not index.all()


class TestLookup:
    def test_find_by_identifier(self, index):
        found = index.find("2017-05-28-decorators")
        assert [p.identifier for p in found] == ["2017-05-28-decorators"]

    def test_find_by_slug(self, index):
        assert index.find("partitioning")[0].identifier == "2018-02-11-partitioning"

    def test_find_missing(self, index):
        assert index.find("nope") == []

    def test_duplicate_slugs(self):
        idx = PostIndex([_post("2017-01-01-intro"), _post("2018-01-01-intro"), _post("2018-02-01-other")])
        dupes = idx.duplicate_slugs()
        assert list(dupes) == ["intro"]
        assert len(idx.find("intro")) == 2


class TestCategories:
    def test_counts_case_insensitive(self, index):
        cats = dict(index.categories())
        assert cats["Ruby on Rails"] == 4
        assert "ruby on rails" not in cats
        assert cats["Architecture"] == 2

    def test_sorted_by_name(self, index):
        names = [name for name, _ in index.categories()]
        assert names == sorted(names, key=str.casefold)

    def test_by_category(self, index):
        slugs = [p.slug for p in index.by_category("RUBY ON RAILS")]
        assert slugs == ["partitioning", "decorators", "form-objects", "service-objects"]

    def test_related(self, index):
        post = index.find("service-objects")[0]
        related = [p.slug for p in index.related(post)]
        assert related[0] == "form-objects"
        assert "service-objects" not in related
        assert "ember-decorators" not in related

    def test_related_without_categories(self):
        lonely = _post("2018-01-01-lonely")
        assert PostIndex([lonely, _post("2018-01-02-x", ["A"])]).related(lonely) == []


class TestArchives:
    def test_grouped_by_year_descending(self, index):
        archives = index.archives()
        assert list(archives) == [2018, 2017, 2016]
        assert [p.slug for p in archives[2017]] == ["decorators", "form-objects"]

    def test_by_year(self, index):
        assert len(index.by_year(2018)) == 2

    def test_neighbours(self, index):
        post = index.find("decorators")[0]
        newer, older = index.neighbours(post)
        assert newer.slug == "partitioning"
        assert older.slug == "form-objects"

    def test_neighbours_at_edges(self, index):
        assert index.neighbours(index.all()[0])[0] is None
        assert index.neighbours(index.all()[-1])[1] is None

    def test_neighbours_unknown_post(self, index):
        with pytest.raises(ValueError):
            index.neighbours(_post("2000-01-01-missing"))


class TestPaginate:
    def test_pages(self, index):
        pages = index.paginate(2)
        assert [len(p.posts) for p in pages] == [2, 2, 1]
        assert pages[0].number == 1
        assert pages[0].total_pages == 3
        assert not pages[0].has_previous and pages[0].has_next
        assert pages[-1].has_previous and not pages[-1].has_next

    def test_empty_index_single_page(self):
        pages = PostIndex([]).paginate(10)
        assert len(pages) == 1
        assert pages[0].posts == ()

    def test_invalid_per_page(self, index):
        with pytest.raises(ValueError):
            index.paginate(0)


class TestFromLoader:
    def test_index_over_loaded_site(self, site_config):
        posts, _ = PostLoader(site_config).load_posts(now=datetime(2026, 1, 1))
        idx = PostIndex(posts)
        assert idx.all()[0].slug == "ember-decorators"
        assert dict(idx.categories())["Ruby on Rails"] == 2
