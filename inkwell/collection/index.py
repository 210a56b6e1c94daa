"""PostIndex — ordering, category grouping, archives and pagination over loaded posts."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from inkwell.posts.models import Post


@dataclass(frozen=True)
class PostPage:
    """One page of a paginated post listing (1-based)."""

    number: int
    posts: tuple[Post, ...]
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages


class PostIndex:
    """Read-only view over a set of posts, newest first.

    Ties on date are broken by slug so ordering is stable across runs.
    """

    def __init__(self, posts: Iterable[Post]) -> None:
        ordered = sorted(posts, key=lambda p: p.slug)
        ordered.sort(key=lambda p: p.sort_key[0], reverse=True)
        self._posts: list[Post] = ordered

    def __len__(self) -> int:
        return len(self._posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def all(self) -> list[Post]:
        return list(self._posts)

    def find(self, key: str) -> list[Post]:
        """Posts matching an identifier (YYYY-MM-DD-slug) or a bare slug."""
        exact = [p for p in self._posts if p.identifier == key]
        if exact:
            return exact
        return [p for p in self._posts if p.slug == key]

    def categories(self) -> list[tuple[str, int]]:
        """(category, post count) pairs, grouped case-insensitively, sorted by name.

        The display name is the first spelling met in newest-first order.
        """
        names: dict[str, str] = {}
        counts: Counter[str] = Counter()
        for post in self._posts:
            for category in {c.casefold(): c for c in reversed(post.categories)}.values():
                key = category.casefold()
                names.setdefault(key, category)
                counts[key] += 1
        return sorted(((names[k], n) for k, n in counts.items()), key=lambda t: t[0].casefold())

    def by_category(self, name: str) -> list[Post]:
        key = name.casefold()
        return [p for p in self._posts if any(c.casefold() == key for c in p.categories)]

    def by_year(self, year: int) -> list[Post]:
        return [p for p in self._posts if p.date is not None and p.date.year == year]

    def archives(self) -> dict[int, list[Post]]:
        """Posts grouped by year, newest year first."""
        grouped: dict[int, list[Post]] = {}
        for post in self._posts:
            if post.date is None:
                continue
            grouped.setdefault(post.date.year, []).append(post)
        return dict(sorted(grouped.items(), reverse=True))

    def neighbours(self, post: Post) -> tuple[Post | None, Post | None]:
        """(newer, older) posts adjacent to `post` in the listing."""
        idx = self._position(post)
        newer = self._posts[idx - 1] if idx > 0 else None
        older = self._posts[idx + 1] if idx + 1 < len(self._posts) else None
        return newer, older

    def related(self, post: Post, limit: int = 5) -> list[Post]:
        """Other posts sharing the most categories with `post`."""
        mine = {c.casefold() for c in post.categories}
        if not mine:
            return []
        scored: list[tuple[int, int, Post]] = []
        for order, other in enumerate(self._posts):
            if other.identifier == post.identifier:
                continue
            shared = len(mine & {c.casefold() for c in other.categories})
            if shared:
                scored.append((-shared, order, other))
        scored.sort(key=lambda t: (t[0], t[1]))
        return [p for _, _, p in scored[:limit]]

    def paginate(self, per_page: int) -> list[PostPage]:
        if per_page < 1:
            raise ValueError(f"per_page must be at least 1, got {per_page}")
        total = max(1, math.ceil(len(self._posts) / per_page))
        return [
            PostPage(
                number=n + 1,
                posts=tuple(self._posts[n * per_page : (n + 1) * per_page]),
                total_pages=total,
            )
            for n in range(total)
        ]

    def duplicate_slugs(self) -> dict[str, list[Post]]:
        """Slugs used by more than one post file."""
        grouped: dict[str, list[Post]] = {}
        for post in self._posts:
            grouped.setdefault(post.slug, []).append(post)
        return {slug: posts for slug, posts in sorted(grouped.items()) if len(posts) > 1}

    def _position(self, post: Post) -> int:
        for i, candidate in enumerate(self._posts):
            if candidate.identifier == post.identifier and candidate.path == post.path:
                return i
        raise ValueError(f"Post {post.identifier!r} is not in this index")
