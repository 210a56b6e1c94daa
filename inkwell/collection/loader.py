"""PostLoader — reads post and page files from a Jekyll-style source tree."""

from __future__ import annotations

import fnmatch
import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from inkwell.collection.models import LoadError, LoadReport, SkippedFile
from inkwell.config.models import InkwellConfig
from inkwell.posts.filename import parse_post_filename
from inkwell.posts.frontmatter import parse_frontmatter, split_frontmatter
from inkwell.posts.models import FilenameError, Post, PostError, PostFilename, naive_utc

logger = logging.getLogger(__name__)


class PostLoader:
    def __init__(self, config: InkwellConfig | None = None) -> None:
        self.config = config or InkwellConfig()
        self.source = Path(self.config.source)
        self._extensions = {ext.lower().lstrip(".") for ext in self.config.markdown_ext}

    # -- Public API ----------------------------------------------------------

    def load_post(self, path: str | Path) -> Post:
        """Read and parse a single dated post file."""
        path = Path(path)
        filename = parse_post_filename(path.name)
        return self._load(path, filename=filename)

    def load_page(self, path: str | Path) -> Post:
        """Read and parse an undated document such as about.markdown."""
        return self._load(Path(path), filename=None)

    def load_posts(
        self, directory: str | Path | None = None, now: datetime | None = None
    ) -> tuple[list[Post], LoadReport]:
        """Load every post under the posts directory.

        Per-file failures are collected in the report; the scan never aborts.
        """
        start = time.monotonic()
        report = LoadReport()
        posts: list[Post] = []
        root = Path(directory) if directory is not None else self.source / self.config.posts_dir
        cutoff = naive_utc(now or datetime.now(timezone.utc))

        if not root.is_dir():
            report.errors.append(LoadError(file=str(root), error="Posts directory not found"))
            report.duration = time.monotonic() - start
            return posts, report

        for path in sorted(root.rglob("*")):
            if not path.is_file() or not self._is_markdown(path):
                continue
            rel = str(path.relative_to(root))
            if self._is_excluded(path):
                report.skipped.append(SkippedFile(file=rel, reason="excluded"))
                continue
            try:
                post = self.load_post(path)
            except FilenameError as exc:
                report.skipped.append(SkippedFile(file=rel, reason=exc.message))
                logger.warning("Skipping %s: %s", rel, exc.message)
                continue
            except (PostError, OSError, UnicodeDecodeError) as exc:
                report.errors.append(LoadError(file=rel, error=str(exc)))
                logger.error("Error loading %s: %s", rel, exc)
                continue

            if not post.published and not self.config.unpublished:
                report.skipped.append(SkippedFile(file=rel, reason="unpublished"))
                continue
            if not self.config.future and post.sort_key[0] > cutoff:
                report.skipped.append(SkippedFile(file=rel, reason="dated in the future"))
                continue

            posts.append(post)
            report.loaded += 1
            logger.debug("Loaded post %s", post.identifier)

        report.duration = time.monotonic() - start
        return posts, report

    def load_pages(self, root: str | Path | None = None) -> tuple[list[Post], LoadReport]:
        """Load undated documents with front matter outside `_`-prefixed directories."""
        start = time.monotonic()
        report = LoadReport()
        pages: list[Post] = []
        base = Path(root) if root is not None else self.source

        for path in sorted(base.rglob("*")):
            if not path.is_file() or not self._is_markdown(path):
                continue
            rel_path = path.relative_to(base)
            if any(part.startswith(("_", ".")) for part in rel_path.parts[:-1]):
                continue
            rel = str(rel_path)
            if self._is_excluded(path):
                report.skipped.append(SkippedFile(file=rel, reason="excluded"))
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                report.errors.append(LoadError(file=rel, error=str(exc)))
                logger.error("Error reading %s: %s", rel, exc)
                continue
            # Plain Markdown without front matter (README.md) is not a page
            if split_frontmatter(text)[0] is None:
                report.skipped.append(SkippedFile(file=rel, reason="no front matter"))
                continue
            try:
                page = self._build(path, text, filename=None, rel_path=rel_path)
            except PostError as exc:
                report.errors.append(LoadError(file=rel, error=str(exc)))
                logger.error("Error loading %s: %s", rel, exc)
                continue
            pages.append(page)
            report.loaded += 1

        report.duration = time.monotonic() - start
        return pages, report

    # -- Internals -----------------------------------------------------------

    def _load(self, path: Path, filename: PostFilename | None) -> Post:
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise PostError(path, f"Not valid UTF-8: {exc.reason} at byte {exc.start}") from exc
        return self._build(path, text, filename=filename)

    def _build(
        self,
        path: Path,
        text: str,
        filename: PostFilename | None,
        rel_path: Path | None = None,
    ) -> Post:
        front_matter, body = parse_frontmatter(text, path=str(path))
        if filename is None and rel_path is None:
            rel_path = self._relative_to_source(path)
        return Post(
            path=path,
            filename=filename,
            rel_path=rel_path,
            front_matter=front_matter,
            body=body,
            excerpt_separator=self.config.excerpt_separator,
        )

    def _relative_to_source(self, path: Path) -> Path | None:
        try:
            return path.resolve().relative_to(self.source.resolve())
        except ValueError:
            return None

    def _is_markdown(self, path: Path) -> bool:
        return path.suffix.lower().lstrip(".") in self._extensions

    def _is_excluded(self, path: Path) -> bool:
        rel_path = self._relative_to_source(path)
        rel = rel_path.as_posix() if rel_path is not None else path.as_posix()
        for pattern in self.config.exclude:
            pattern = pattern.rstrip("/")
            if not pattern:
                continue
            if rel == pattern or rel.startswith(pattern + "/") or fnmatch.fnmatch(rel, pattern):
                return True
        return False
