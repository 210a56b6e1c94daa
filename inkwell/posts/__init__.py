"""Post model and the file-format rules it is parsed from."""

from inkwell.posts.body import (
    DEFAULT_EXCERPT_SEPARATOR,
    CodeBlock,
    extract_code_blocks,
    split_excerpt,
    strip_more_marker,
)
from inkwell.posts.filename import (
    is_post_filename,
    parse_post_filename,
    post_filename,
    slugify,
)
from inkwell.posts.frontmatter import dump_frontmatter, parse_frontmatter, split_frontmatter
from inkwell.posts.models import (
    FilenameError,
    FrontMatter,
    FrontMatterError,
    Post,
    PostError,
    PostFilename,
)
from inkwell.posts.permalink import absolute_url, expand_permalink

__all__ = [
    "DEFAULT_EXCERPT_SEPARATOR",
    "CodeBlock",
    "FilenameError",
    "FrontMatter",
    "FrontMatterError",
    "Post",
    "PostError",
    "PostFilename",
    "absolute_url",
    "dump_frontmatter",
    "expand_permalink",
    "extract_code_blocks",
    "is_post_filename",
    "parse_frontmatter",
    "parse_post_filename",
    "post_filename",
    "slugify",
    "split_excerpt",
    "split_frontmatter",
    "strip_more_marker",
]
