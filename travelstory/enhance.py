"""Second-pass operations on an existing story: photo enrichment and titles"""

import logging
from typing import Optional, Sequence

from .llm import GenerationClient
from .models import DEFAULT_TITLE, PhotoRef
from .utils.title_extractor import clean_title

logger = logging.getLogger(__name__)

ENHANCE_TEMPERATURE = 0.6
ENHANCE_MAX_TOKENS = 1000
MAX_ENHANCE_PHOTOS = 5

TITLE_TEMPERATURE = 0.8
TITLE_MAX_TOKENS = 50
TITLE_EXCERPT_LENGTH = 500

ENHANCE_SYSTEM_PROMPT = (
    "Tu es un écrivain de voyage. Enrichis le récit existant en y intégrant "
    "naturellement les détails des photos mentionnées."
)

TITLE_SYSTEM_PROMPT = (
    "Tu es un expert en titres accrocheurs. "
    "Génère un titre captivant pour ce récit de voyage en français."
)


def describe_photo(photo: PhotoRef) -> str:
    """One-line photo description used in the enhancement prompt."""
    description = f"Photo: {photo.label}".rstrip()
    if photo.location:
        description += f" à {photo.location}"
    return description


def enhance_story_with_details(
    story: str,
    photos: Sequence[PhotoRef],
    llm_client: GenerationClient,
) -> str:
    """Rewrite a story body to weave in photo captions and locations

    Args:
        story: Existing story body
        photos: Photos whose details should appear in the story
        llm_client: Generation service client

    Returns:
        Enriched body, or the original body when there are no photos or
        the generation fails
    """
    if not photos:
        return story

    photo_descriptions = "\n".join(describe_photo(photo) for photo in photos[:MAX_ENHANCE_PHOTOS])

    user_prompt = f"""Récit existant:
{story}

Photos disponibles:
{photo_descriptions}

Améliore le récit en intégrant ces éléments visuels de manière naturelle et fluide."""

    try:
        logger.info(f"Enhancing story with {min(len(photos), MAX_ENHANCE_PHOTOS)} photos")
        enhanced = llm_client.generate(
            ENHANCE_SYSTEM_PROMPT,
            user_prompt,
            max_tokens=ENHANCE_MAX_TOKENS,
            temperature=ENHANCE_TEMPERATURE,
        )
    except Exception as e:
        logger.error(f"Failed to enhance story, keeping original: {e}")
        return story

    if not enhanced or not enhanced.strip():
        logger.warning("Enhancement returned empty text, keeping original")
        return story

    return enhanced.strip()


def generate_story_title(
    content: str,
    llm_client: GenerationClient,
    fallback_title: Optional[str] = None,
) -> str:
    """Generate a catchy title for a story

    Args:
        content: Story body (only the first 500 characters are sent)
        llm_client: Generation service client
        fallback_title: Title returned when generation fails

    Returns:
        Generated title, else the fallback, else the default title
    """
    fallback = (fallback_title or "").strip() or DEFAULT_TITLE

    user_prompt = (
        "Génère un titre accrocheur pour ce récit de voyage:\n\n"
        f"{(content or '')[:TITLE_EXCERPT_LENGTH]}..."
    )

    try:
        response = llm_client.generate(
            TITLE_SYSTEM_PROMPT,
            user_prompt,
            max_tokens=TITLE_MAX_TOKENS,
            temperature=TITLE_TEMPERATURE,
        )
    except Exception as e:
        logger.error(f"Failed to generate title: {e}")
        return fallback

    first_line = next((line for line in (response or "").splitlines() if line.strip()), "")
    title = clean_title(first_line)
    if not title:
        logger.warning("Generated title was empty, using fallback")
        return fallback

    logger.info(f"Generated title: {title}")
    return title
