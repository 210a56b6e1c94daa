"""inkwell — read and browse Markdown blog posts with YAML front matter."""

__version__ = "0.1.0"
