"""Render trip and photo facts into the context block used by the prompts."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional, Sequence, Union

from .models import PhotoRef, StorySettings, TripContext

logger = logging.getLogger(__name__)

MAX_CONTEXT_PHOTOS = 10


def format_trip_date(value: Union[str, date, None], language: str = "french") -> Optional[str]:
    """Format a trip date the way the reader's locale expects.

    Args:
        value: ISO date string, date or datetime
        language: Story language ('french' -> dd/mm/yyyy, 'english' -> m/d/yyyy)

    Returns:
        Formatted date, the raw value if it cannot be parsed, or None
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip()).date()
        except ValueError:
            logger.warning(f"Unparseable trip date: {value}")
            return str(value)

    if language == "english":
        return f"{parsed.month}/{parsed.day}/{parsed.year}"
    return parsed.strftime("%d/%m/%Y")


def _render_photo(index: int, photo: PhotoRef) -> str:
    parts = []
    if photo.caption:
        parts.append(photo.caption)
    if photo.location:
        parts.append(f"({photo.location})")
    if photo.original_name:
        parts.append(f"[{photo.original_name}]")
    return f"{index}. {' '.join(parts)}".rstrip()


def build_story_context(
    trip: Optional[TripContext],
    photos: Sequence[PhotoRef],
    settings: StorySettings,
) -> str:
    """Build the textual context block describing the trip

    Args:
        trip: Trip metadata, if any
        photos: Trip photos in display order
        settings: Story settings (only the language is used, for dates)

    Returns:
        Context block; empty string when there is nothing to describe
    """
    sections: List[str] = []

    if trip is not None:
        lines = [f"Voyage: {trip.title}"]
        if trip.description:
            lines.append(f"Description: {trip.description}")
        if trip.location:
            lines.append(f"Destination: {trip.location}")
        start = format_trip_date(trip.start_date, settings.language)
        if start:
            lines.append(f"Date de début: {start}")
        end = format_trip_date(trip.end_date, settings.language)
        if end:
            lines.append(f"Date de fin: {end}")
        sections.append("\n".join(lines))

    if photos:
        lines = [f"Photos du voyage ({len(photos)} photos):"]
        for index, photo in enumerate(photos[:MAX_CONTEXT_PHOTOS], 1):
            lines.append(_render_photo(index, photo))
        sections.append("\n".join(lines))

    return "\n\n".join(sections)
