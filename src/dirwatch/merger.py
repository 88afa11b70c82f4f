"""Fold new entry lines into the target note.

The note is kept canonical: every line sorted case- and accent-insensitively
(refined by the current locale's collation) and no two adjacent lines
identical.  Blank lines are dropped
before sorting, so merging is idempotent and the output never ends with a
newline.
"""

from __future__ import annotations

import locale
import re
import unicodedata
from collections.abc import Iterable
from typing import Any

import yaml

# YAML front-matter block
_FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(?:(.*?)\n)??---[ \t]*(?:\n|$)", re.DOTALL)


def split_frontmatter(content: str) -> tuple[str, str]:
    """Split a leading YAML front-matter block from the body.

    Returns ``(block, body)`` where ``block`` is the verbatim block without
    its trailing newline, or ``""`` when there is no block or it is not
    valid YAML.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return "", content
    try:
        meta: Any = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError:
        return "", content
    if meta is not None and not isinstance(meta, dict):
        return "", content
    return match.group(0).rstrip("\n"), content[match.end() :]


def _fold(line: str) -> str:
    """Case- and accent-insensitive form of *line*."""
    decomposed = unicodedata.normalize("NFKD", line)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def collation_key(line: str) -> tuple[str, str, str]:
    """Sort key: letters first, then accents and case, then the raw text.

    The folded form keeps ``a``/``A``/``á`` together even when
    ``LC_COLLATE`` is still ``C``.  The raw string breaks remaining ties so
    identical lines always end up adjacent.
    """
    return locale.strxfrm(_fold(line)), locale.strxfrm(line), line


def sort_dedupe(lines: Iterable[str]) -> list[str]:
    """Sort *lines* and drop each line equal to its predecessor."""
    result: list[str] = []
    for line in sorted((ln for ln in lines if ln.strip()), key=collation_key):
        if result and result[-1] == line:
            continue
        result.append(line)
    return result


def merge_content(
    previous: str,
    new_lines: Iterable[str],
    *,
    preserve_frontmatter: bool = False,
) -> str:
    """Return *previous* with *new_lines* merged in, sorted and de-duplicated.

    >>> merge_content("- a\\n- b", ["- b", "- c"])
    '- a\\n- b\\n- c'
    """
    header = ""
    body = previous
    if preserve_frontmatter:
        header, body = split_frontmatter(previous)

    combined = "\n".join([body, *new_lines])
    merged = "\n".join(sort_dedupe(combined.splitlines()))

    if header:
        return f"{header}\n{merged}" if merged else header
    return merged
