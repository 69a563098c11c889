"""Strip markdown and decorative symbols before text is read aloud."""

import re

_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")
_CODE_RE = re.compile(r"`(.*?)`")
_HEADING_RE = re.compile(r"#{1,6}\s")
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
# Emoji, pictographs, dingbats, check marks and the variation selector.
_SYMBOL_RE = re.compile(
    "["
    "\U0001f000-\U0001faff"
    "\u2600-\u27bf"
    "\u2b00-\u2bff"
    "\ufe0f"
    "\u200d"
    "]"
)
_SPACES_RE = re.compile(r"[ \t]{2,}")


def clean_text_for_speech(text: str) -> str:
    """Return text without bold, italic, code, heading or link syntax and emoji."""
    cleaned = _BOLD_RE.sub(r"\1", text)
    cleaned = _ITALIC_RE.sub(r"\1", cleaned)
    cleaned = _CODE_RE.sub(r"\1", cleaned)
    cleaned = _HEADING_RE.sub("", cleaned)
    cleaned = _LINK_RE.sub(r"\1", cleaned)
    cleaned = _SYMBOL_RE.sub("", cleaned)
    cleaned = _SPACES_RE.sub(" ", cleaned)
    return cleaned.strip()
