"""IndexWriter — exports post metadata to a YAML or JSON index file."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

import yaml

from inkwell.collection.index import PostIndex
from inkwell.config.models import InkwellConfig
from inkwell.posts.models import Post
from inkwell.posts.permalink import expand_permalink

logger = logging.getLogger(__name__)

INDEX_BASENAME = "_posts_index"


class IndexWriter:
    """Writes one entry per post to _posts_index.yaml (or .json).

    Entries carry identifier, title, date, categories, permalink,
    whether the post has a "more" excerpt, and code languages used.
    """

    def __init__(self, output_dir: str | Path, config: InkwellConfig | None = None) -> None:
        self.output_dir = Path(output_dir)
        self.config = config or InkwellConfig()

    def entries(self, index: PostIndex) -> list[dict]:
        return [self._entry(post) for post in index]

    def write(
        self,
        index: PostIndex,
        *,
        fmt: Literal["yaml", "json"] = "yaml",
        dry_run: bool = False,
    ) -> Path:
        """Write the index file. Returns the Path of the written (or would-be) file."""
        if fmt not in ("yaml", "json"):
            raise ValueError(f"Unknown index format: {fmt!r}")
        dest = self.output_dir / f"{INDEX_BASENAME}.{fmt}"

        if dry_run:
            logger.debug("dry-run: would write %s", dest)
            return dest

        payload = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "count": len(index),
            "posts": self.entries(index),
        }
        if fmt == "json":
            text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
        else:
            text = yaml.safe_dump(
                payload, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(text, encoding="utf-8")
        logger.info("wrote %s (%d posts)", dest, len(index))
        return dest

    def _entry(self, post: Post) -> dict:
        return {
            "identifier": post.identifier,
            "title": post.title,
            "date": post.date.isoformat() if post.date else None,
            "categories": post.categories,
            "permalink": expand_permalink(post, self.config.permalink),
            "comments": post.comments if post.comments is not None else self.config.comments,
            "has_more": post.has_more,
            "languages": post.languages,
            "path": str(post.path),
        }
