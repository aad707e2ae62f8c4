"""Reduce markdown/HTML hybrid documents to searchable text.

The Dyalog sources mix markdown with a handful of HTML elements. Each
document is reduced to a title, the search keywords hidden in
``display: none`` blocks, and a cleaned body.

Stage order matters: keywords are read before hidden blocks are removed,
and the title is read before ``<h1>`` elements become markdown headings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Tuple, Union

_FRONT_MATTER_RE = re.compile(r"\A---.*?\n---", re.DOTALL)
_MD_H1_RE = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)
_HTML_TAG_RE = re.compile(r"<[^>]+>")
_HIDDEN_DIV_RE = re.compile(r"<div[^>]*display:\s*none[^>]*>(.*?)</div>\s*", re.DOTALL)


def _element(tag: str, attributes: bool = True) -> re.Pattern:
    """Innermost ``<tag>...</tag>``: the body never opens another ``tag``."""
    opening = rf"<{tag}[^>]*>" if attributes else rf"<{tag}>"
    return re.compile(rf"{opening}((?:(?!<{tag}[\s>]).)*?)</{tag}>")


_H1_RE = _element("h1")
_H2_RE = _element("h2")
_H3_RE = _element("h3")
_SPAN_RE = re.compile(r"</?span[^>]*>")
_BR_RE = re.compile(r"<br\s*/?>")
_KBD_RE = _element("kbd", attributes=False)
_SUP_RE = _element("sup", attributes=False)
_STRONG_RE = _element("strong", attributes=False)
_DIV_RE = re.compile(r"</?div[^>]*>")

Replacement = Union[str, Callable[[re.Match], str]]

# Markup rewrites applied to the body after hidden blocks are gone.
# (name, pattern, replacement), applied top to bottom.
MARKUP_STAGES: List[Tuple[str, re.Pattern, Replacement]] = [
    ("h1", _H1_RE, r"# \1"),
    ("h2", _H2_RE, r"## \1"),
    ("h3", _H3_RE, r"### \1"),
    ("span", _SPAN_RE, ""),
    ("br", _BR_RE, "\n"),
    ("kbd", _KBD_RE, r"`\1`"),
    ("sup", _SUP_RE, r"\1"),
    ("strong", _STRONG_RE, r"**\1**"),
    ("div", _DIV_RE, ""),
]


@dataclass(frozen=True)
class NormalizedDocument:
    title: str
    keywords: str
    content: str


def strip_front_matter(text: str) -> str:
    """Drop a leading ``---`` metadata block and the blank lines after it."""
    if not text.startswith("---"):
        return text
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return text
    return text[match.end():].lstrip("\n")


def extract_title(text: str) -> str:
    """First ``# heading``, else first ``<h1>`` with inner tags removed, else ``""``."""
    match = _MD_H1_RE.search(text)
    if match:
        return match.group(1).strip()
    match = _H1_RE.search(text)
    if match:
        return _HTML_TAG_RE.sub("", match.group(1)).strip()
    return ""


def extract_keywords(text: str) -> str:
    """Join the trimmed text of every hidden block, in document order."""
    keywords = []
    for match in _HIDDEN_DIV_RE.finditer(text):
        keyword = match.group(1).strip()
        if keyword:
            keywords.append(keyword)
    return " ".join(keywords)


def remove_hidden_blocks(text: str) -> str:
    return _HIDDEN_DIV_RE.sub("", text)


def _rewrite(pattern: re.Pattern, replacement: Replacement, text: str) -> str:
    # Nested elements unwrap one level per pass
    while True:
        text, count = pattern.subn(replacement, text)
        if not count:
            return text


def apply_stage(name: str, text: str) -> str:
    """Run a single named markup stage. Mostly useful for tests."""
    for stage_name, pattern, replacement in MARKUP_STAGES:
        if stage_name == name:
            return _rewrite(pattern, replacement, text)
    raise KeyError(f"Unknown markup stage: {name}")


def clean_markup(text: str) -> str:
    """Apply every markup stage in order until the text stops changing.

    Every rewrite removes at least one tag, so this terminates; a later
    stage can expose markup an earlier one handles (``<h<span>1>``).
    Idempotent on its own output.
    """
    while True:
        cleaned = text
        for _name, pattern, replacement in MARKUP_STAGES:
            cleaned = _rewrite(pattern, replacement, cleaned)
        if cleaned == text:
            return cleaned
        text = cleaned


def normalize_document(raw: str) -> NormalizedDocument:
    """Extract the title, keywords and cleaned body of a raw document."""
    text = strip_front_matter(raw)
    title = extract_title(text)
    keywords = extract_keywords(text)
    text = remove_hidden_blocks(text)
    return NormalizedDocument(title=title, keywords=keywords, content=clean_markup(text))
