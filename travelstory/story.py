"""Travel story generation: context -> prompt -> generation -> structured story"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .compose import compose_story_prompt
from .context import build_story_context
from .llm import GenerationClient, GenerationError
from .models import GeneratedStory, PhotoRef, StoryPhoto, StorySettings, TripContext
from .utils.text_metrics import count_words, estimate_reading_time, extract_highlights
from .utils.title_extractor import parse_generated_story

logger = logging.getLogger(__name__)

MAX_STORY_PHOTOS = 6
STORY_CONCURRENCY = 3


@dataclass
class StoryRequest:
    """Input of one story generation call."""

    trip: Optional[TripContext]
    photos: List[PhotoRef]
    settings: StorySettings
    custom_prompt: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoryRequest":
        """Build a request from the JSON body {trip, photos, settings, customPrompt}."""
        trip_data = data.get("trip") or data.get("tripData")
        return cls(
            trip=TripContext.from_dict(trip_data) if trip_data else None,
            photos=[PhotoRef.from_dict(photo) for photo in data.get("photos") or []],
            settings=StorySettings.from_dict(data.get("settings") or {}),
            custom_prompt=data.get("customPrompt"),
        )


@dataclass
class BatchResult:
    """Container for generate_travel_stories outputs."""

    stories: List[Optional[GeneratedStory]] = field(default_factory=list)
    failed: int = 0

    @property
    def succeeded(self) -> int:
        return sum(1 for story in self.stories if story is not None)


def select_story_photos(photos: Sequence[PhotoRef], settings: StorySettings) -> List[StoryPhoto]:
    """Photos attached to the story; empty unless settings.include_photos."""
    if not settings.include_photos:
        return []
    return [
        StoryPhoto(
            id=photo.id,
            url=photo.url,
            caption=photo.label,
            location=photo.location,
        )
        for photo in photos[:MAX_STORY_PHOTOS]
    ]


def assemble_story(
    generated_text: str,
    trip: Optional[TripContext],
    photos: Sequence[PhotoRef],
    settings: StorySettings,
) -> GeneratedStory:
    """Turn raw generated text into a GeneratedStory

    Args:
        generated_text: Text returned by the generation service
        trip: Trip metadata; its title is the fallback story title
        photos: Trip photos in display order
        settings: Settings the story was generated with

    Returns:
        New GeneratedStory with fresh id and timestamp
    """
    fallback_title = trip.title if trip is not None else None
    parsed = parse_generated_story(generated_text, fallback_title)

    word_count = count_words(parsed.content)

    return GeneratedStory(
        title=parsed.title,
        content=parsed.content,
        style=settings.style,
        mood=settings.mood,
        length=settings.length,
        include_photos=settings.include_photos,
        include_map=settings.include_map,
        include_stats=settings.include_stats,
        word_count=word_count,
        reading_time=estimate_reading_time(word_count),
        highlights=extract_highlights(parsed.content),
        photos=select_story_photos(photos, settings),
    )


def generate_travel_story(
    request: StoryRequest,
    llm_client: GenerationClient,
) -> GeneratedStory:
    """Generate a structured travel story

    Args:
        request: Trip, photos, settings and optional custom instructions
        llm_client: Generation service client

    Returns:
        GeneratedStory

    Raises:
        GenerationError: The generation service failed
    """
    context = build_story_context(request.trip, request.photos, request.settings)
    prompt = compose_story_prompt(context, request.settings, request.custom_prompt)

    try:
        generated_text = llm_client.generate(
            prompt.system,
            prompt.user,
            max_tokens=prompt.max_tokens,
            temperature=prompt.temperature,
        )
    except GenerationError as e:
        logger.error(f"Failed to generate travel story: {e}")
        raise

    story = assemble_story(generated_text, request.trip, request.photos, request.settings)
    logger.info(
        f"Story generated: '{story.title}' ({story.word_count} words, "
        f"{len(story.highlights)} highlights, {len(story.photos)} photos)"
    )
    return story


def generate_travel_stories(
    story_requests: Sequence[StoryRequest],
    llm_client: GenerationClient,
    max_concurrency: int = STORY_CONCURRENCY,
) -> BatchResult:
    """Generate several independent stories concurrently.

    Results keep the input order; a failed request leaves None in its slot.
    """

    async def _run() -> BatchResult:
        semaphore = asyncio.Semaphore(max_concurrency)
        loop = asyncio.get_running_loop()
        executor = ThreadPoolExecutor(max_workers=max_concurrency)
        failed = 0

        async def _generate_with_limit(index: int, request: StoryRequest):
            nonlocal failed
            async with semaphore:
                try:
                    logger.info("Generating story %s/%s", index, len(story_requests))
                    return await loop.run_in_executor(
                        executor,
                        generate_travel_story,
                        request,
                        llm_client,
                    )
                except GenerationError as exc:
                    failed += 1
                    logger.error("Skipping story %s due to generation error: %s", index, exc)
                    return None

        try:
            stories = await asyncio.gather(
                *(_generate_with_limit(i, request) for i, request in enumerate(story_requests, 1))
            )
        finally:
            executor.shutdown(wait=True, cancel_futures=False)

        logger.info(
            "Generated %s/%s stories (failed=%s)",
            len(stories) - failed,
            len(story_requests),
            failed,
        )
        return BatchResult(stories=list(stories), failed=failed)

    return asyncio.run(_run())
