"""Markdown body scanning: excerpt splitting and embedded code listings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

DEFAULT_EXCERPT_SEPARATOR = "<!-- more -->"

# <!--more-->, <!-- more -->, <!-- MORE --> all count as the default marker.
_MORE_RE = re.compile(r"<!--\s*more\s*-->", re.IGNORECASE)

_FENCE_OPEN_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})[ \t]*(?P<info>.*?)[ \t]*$")
_HIGHLIGHT_OPEN_RE = re.compile(r"^\s*\{%-?\s*highlight\s+(?P<lang>[\w+#.-]+)[^%]*-?%\}\s*$")
_HIGHLIGHT_CLOSE_RE = re.compile(r"^\s*\{%-?\s*endhighlight\s*-?%\}\s*$")
_CODEBLOCK_OPEN_RE = re.compile(r"^\s*\{%-?\s*codeblock(?:\s+(?P<args>.*?))?\s*-?%\}\s*$")
_CODEBLOCK_CLOSE_RE = re.compile(r"^\s*\{%-?\s*endcodeblock\s*-?%\}\s*$")
_LANG_ARG_RE = re.compile(r"(?:^|\s)lang:(\S+)")

CodeStyle = Literal["backtick", "tilde", "highlight", "codeblock"]


@dataclass(frozen=True)
class CodeBlock:
    """A code listing embedded in a post body.

    Line numbers are 1-based and point at the opening and closing
    delimiter lines within the body.
    """

    language: str | None
    code: str
    start_line: int
    end_line: int
    style: CodeStyle = "backtick"
    title: str | None = None
    closed: bool = True


def extract_code_blocks(body: str) -> list[CodeBlock]:
    """Return every fenced or Liquid-tagged code listing in document order."""
    lines = body.splitlines()
    blocks: list[CodeBlock] = []
    i = 0
    while i < len(lines):
        block = _match_block(lines, i)
        if block is None:
            i += 1
            continue
        blocks.append(block)
        i = block.end_line  # end_line is 1-based, so this is the next line
    return blocks


def split_excerpt(body: str, separator: str = DEFAULT_EXCERPT_SEPARATOR) -> tuple[str, bool]:
    """Split off the preview excerpt.

    Returns (excerpt, found). Separators inside code listings are ignored.
    Without a separator, or with an empty one, the whole body is the excerpt.
    """
    span = _find_separator(body, separator)
    if span is None:
        return body.strip(), False
    return body[: span[0]].strip(), True


def strip_more_marker(body: str, separator: str = DEFAULT_EXCERPT_SEPARATOR) -> str:
    """Return the body with the first excerpt separator removed."""
    span = _find_separator(body, separator)
    if span is None:
        return body
    return body[: span[0]] + body[span[1]:]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _find_separator(body: str, separator: str) -> tuple[int, int] | None:
    if not separator:
        return None
    if _MORE_RE.fullmatch(separator.strip()):
        pattern = _MORE_RE
    else:
        pattern = re.compile(re.escape(separator))

    code_lines = _code_line_numbers(body)
    # Leading blank lines never split, so "\n\n" means "after the first paragraph"
    start = len(body) - len(body.lstrip())
    for m in pattern.finditer(body, start):
        line_no = body.count("\n", 0, m.start()) + 1
        if line_no not in code_lines:
            return m.start(), m.end()
    return None


def _code_line_numbers(body: str) -> set[int]:
    numbers: set[int] = set()
    for block in extract_code_blocks(body):
        numbers.update(range(block.start_line, block.end_line + 1))
    return numbers


def _match_block(lines: list[str], start: int) -> CodeBlock | None:
    line = lines[start]

    m = _FENCE_OPEN_RE.match(line)
    if m:
        fence = m.group("fence")
        info = m.group("info")
        # Backtick fences cannot carry backticks in their info string
        if fence[0] == "`" and "`" in info:
            return None
        close_re = re.compile(
            r"^ {0,3}" + re.escape(fence[0]) + "{" + str(len(fence)) + r",}[ \t]*$"
        )
        language, title = _split_info(info)
        style: CodeStyle = "backtick" if fence[0] == "`" else "tilde"
        return _collect(lines, start, close_re, language, title, style)

    m = _HIGHLIGHT_OPEN_RE.match(line)
    if m:
        return _collect(lines, start, _HIGHLIGHT_CLOSE_RE, m.group("lang"), None, "highlight")

    m = _CODEBLOCK_OPEN_RE.match(line)
    if m:
        language, title = _parse_codeblock_args(m.group("args") or "")
        return _collect(lines, start, _CODEBLOCK_CLOSE_RE, language, title, "codeblock")

    return None


def _collect(
    lines: list[str],
    start: int,
    close_re: re.Pattern,
    language: str | None,
    title: str | None,
    style: CodeStyle,
) -> CodeBlock:
    for j in range(start + 1, len(lines)):
        if close_re.match(lines[j]):
            return CodeBlock(
                language=language,
                code="\n".join(lines[start + 1 : j]),
                start_line=start + 1,
                end_line=j + 1,
                style=style,
                title=title,
                closed=True,
            )
    # Unclosed listing runs to the end of the body
    return CodeBlock(
        language=language,
        code="\n".join(lines[start + 1 :]),
        start_line=start + 1,
        end_line=len(lines),
        style=style,
        title=title,
        closed=False,
    )


def _split_info(info: str) -> tuple[str | None, str | None]:
    """``ruby app/models/user.rb`` -> ("ruby", "app/models/user.rb")"""
    parts = info.split(None, 1)
    if not parts:
        return None, None
    language = parts[0].strip("{}.") or None
    title = parts[1].strip() if len(parts) > 1 else None
    return language, title or None


def _parse_codeblock_args(args: str) -> tuple[str | None, str | None]:
    m = _LANG_ARG_RE.search(args)
    language = m.group(1) if m else None
    title = _LANG_ARG_RE.sub(" ", args).strip() if m else args.strip()
    return language, title or None
