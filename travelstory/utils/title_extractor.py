"""Title/body splitting for generated stories

The first line is taken as the title when it is shorter than 100
characters and contains no period. A short, period-free opening sentence
with no title above it is therefore mistaken for a title; this is a
known false negative of the heuristic and is kept as is.
"""

import logging
import re
from typing import NamedTuple, Optional

from ..models import DEFAULT_TITLE

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 100

_TITLE_PREFIX_RE = re.compile(r"^(?:titre|title)\s*:\s*", re.IGNORECASE)
_HEADING_MARKER_RE = re.compile(r"^#{1,6}\s*")
_EMPHASIS_RE = re.compile(r"^(\*\*|__)(.+)\1$")
_QUOTES = "\"'«»“”"


class ParsedStory(NamedTuple):
    title: str
    content: str


def _looks_like_title(line: str) -> bool:
    return len(line) < MAX_TITLE_LENGTH and "." not in line


def clean_title(title: str) -> str:
    """Remove Markdown markers, quotes and "Titre:"/"Title:" prefixes

    Args:
        title: Raw title line

    Returns:
        Cleaned title (may be empty)
    """
    cleaned = title.strip()
    cleaned = _HEADING_MARKER_RE.sub("", cleaned)

    emphasis = _EMPHASIS_RE.match(cleaned)
    if emphasis:
        cleaned = emphasis.group(2).strip()

    cleaned = _TITLE_PREFIX_RE.sub("", cleaned)
    return cleaned.strip().strip(_QUOTES).strip()


def parse_generated_story(content: Optional[str], fallback_title: Optional[str] = None) -> ParsedStory:
    """Split generated text into a title and a body

    Args:
        content: Raw text returned by the generation service
        fallback_title: Title used when no title line is found (usually the trip title)

    Returns:
        ParsedStory with a non-empty title and the (possibly empty) body
    """
    default = (fallback_title or "").strip() or DEFAULT_TITLE
    lines = (content or "").replace("\r\n", "\n").replace("\r", "\n").split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)

    title = default
    body = "\n".join(lines).strip()

    first_line = lines[0].strip() if lines else ""
    if first_line and _looks_like_title(first_line):
        title = first_line
        body = "\n".join(lines[1:]).strip()

    title = clean_title(title)
    if not title:
        logger.warning("Generated title was empty after cleanup, using fallback")
        title = default

    return ParsedStory(title=title, content=body)
