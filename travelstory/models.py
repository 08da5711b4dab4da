"""Data model for the travel story pipeline."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

STYLES = frozenset({"narrative", "diary", "blog", "social", "formal"})
MOODS = frozenset({"adventurous", "romantic", "peaceful", "exciting", "nostalgic"})
LENGTHS = frozenset({"short", "medium", "long"})
LANGUAGES = frozenset({"french", "english"})

DEFAULT_TITLE = "Mon voyage"


def _check_choice(name: str, value: str, allowed: frozenset) -> None:
    if value not in allowed:
        raise ValueError(
            f"Invalid {name}: {value!r} (expected one of {', '.join(sorted(allowed))})"
        )


@dataclass(frozen=True)
class StorySettings:
    """User-chosen configuration for a single generation request."""

    style: str = "narrative"
    mood: str = "adventurous"
    length: str = "medium"
    include_photos: bool = True
    include_map: bool = False
    include_stats: bool = False
    focus_points: Tuple[str, ...] = ()
    personal_touch: bool = True
    language: str = "french"

    def __post_init__(self):
        _check_choice("style", self.style, STYLES)
        _check_choice("mood", self.mood, MOODS)
        _check_choice("length", self.length, LENGTHS)
        _check_choice("language", self.language, LANGUAGES)
        # Lists are accepted but stored as a tuple to keep the settings hashable
        object.__setattr__(self, "focus_points", tuple(self.focus_points))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StorySettings":
        """Build settings from the camelCase JSON shape sent by the client."""
        return cls(
            style=data.get("style", "narrative"),
            mood=data.get("mood", "adventurous"),
            length=data.get("length", "medium"),
            include_photos=bool(data.get("includePhotos", True)),
            include_map=bool(data.get("includeMap", False)),
            include_stats=bool(data.get("includeStats", False)),
            focus_points=tuple(
                str(point).strip() for point in data.get("focusPoints") or [] if str(point).strip()
            ),
            personal_touch=bool(data.get("personalTouch", True)),
            language=data.get("language", "french"),
        )


@dataclass(frozen=True)
class TripContext:
    """Trip metadata supplied by the storage layer."""

    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TripContext":
        return cls(
            title=data.get("title") or "",
            description=data.get("description"),
            location=data.get("location"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
        )


@dataclass(frozen=True)
class PhotoRef:
    """Photo reference supplied by the storage layer."""

    id: int
    url: str
    caption: Optional[str] = None
    location: Optional[str] = None
    original_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhotoRef":
        return cls(
            id=data["id"],
            url=data.get("url", ""),
            caption=data.get("caption"),
            location=data.get("location"),
            original_name=data.get("originalName"),
        )

    @property
    def label(self) -> str:
        """Caption, falling back to the original file name."""
        return self.caption or self.original_name or ""


@dataclass
class StoryPhoto:
    """Photo summary attached to a generated story."""

    id: int
    url: str
    caption: str
    location: Optional[str] = None


def new_story_id() -> str:
    return f"story-{uuid.uuid4().hex}"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class GeneratedStory:
    """Structured story record produced by the generation pipeline."""

    title: str
    content: str
    style: str
    mood: str
    length: str
    include_photos: bool
    include_map: bool
    include_stats: bool
    word_count: int
    reading_time: int
    highlights: List[str] = field(default_factory=list)
    photos: List[StoryPhoto] = field(default_factory=list)
    id: str = field(default_factory=new_story_id)
    generated_at: str = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-serializable shape of the story."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "style": self.style,
            "mood": self.mood,
            "length": self.length,
            "includePhotos": self.include_photos,
            "includeMap": self.include_map,
            "includeStats": self.include_stats,
            "generatedAt": self.generated_at,
            "wordCount": self.word_count,
            "readingTime": self.reading_time,
            "highlights": list(self.highlights),
            "photos": [
                {
                    "id": photo.id,
                    "url": photo.url,
                    "caption": photo.caption,
                    "location": photo.location,
                }
                for photo in self.photos
            ],
        }
