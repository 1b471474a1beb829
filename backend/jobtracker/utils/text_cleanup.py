"""
Cleanup for job posting text pasted from browsers, PDFs and job boards.
"""

from __future__ import annotations

import html
import re
import unicodedata

# Typographic characters that confuse the parser prompt or the dedup step
_PUNCTUATION = str.maketrans({
    "\u2018": "'",
    "\u2019": "'",
    "\u201c": '"',
    "\u201d": '"',
    "\u2013": "-",
    "\u2014": "-",
    "\u2026": "...",
    "\u00a0": " ",
    "\u200b": None,
    "\u200c": None,
    "\u200d": None,
    "\ufeff": None,
})

_BULLET_RE = re.compile(r"^\s*(?:[•\-\*●○▪►▸‣⁃]|\d{1,2}[.)])\s*")
_TERM_EDGE_RE = re.compile(r"^[\s\"'`]+|[\s\"'`,;:.]+$")


def normalize_text(text: str) -> str:
    """Flatten a pasted posting into plain text the parser prompt can read."""
    text = html.unescape(unicodedata.normalize("NFKC", text)).translate(_PUNCTUATION)
    text = re.sub(r"<br\s*/?>", "\n", text, flags=re.IGNORECASE)

    lines = [re.sub(r"[ \t]+", " ", line).strip() for line in text.splitlines()]
    return re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()


def extract_bullet_prefix(text: str) -> str:
    """Drop a leading bullet glyph or list number ("- ", "• ", "3) ")."""
    return _BULLET_RE.sub("", text, count=1)


def clean_term(term: str) -> str:
    """A skill or keyword without its bullet, quotes or trailing punctuation."""
    return _TERM_EDGE_RE.sub("", extract_bullet_prefix(term))
