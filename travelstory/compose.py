"""Prompt composition for travel story generation"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from .models import StorySettings
from .prompts import load_prompt, render_prompt

logger = logging.getLogger(__name__)

STORY_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 800

STYLE_DESCRIPTIONS = MappingProxyType({
    "narrative": "un récit narratif fluide et engageant, comme une histoire",
    "diary": "un journal intime personnel et authentique",
    "blog": "un article de blog informatif et bien structuré",
    "social": "un post court et accrocheur pour les réseaux sociaux",
    "formal": "un rapport de voyage professionnel et détaillé",
})

MOOD_DESCRIPTIONS = MappingProxyType({
    "adventurous": "aventurier et dynamique",
    "romantic": "romantique et chaleureux",
    "peaceful": "paisible et contemplatif",
    "exciting": "excitant et énergique",
    "nostalgic": "nostalgique et émotionnel",
})

LENGTH_BANDS = MappingProxyType({
    "short": "court (200-300 mots)",
    "medium": "moyen (400-600 mots)",
    "long": "long (800-1200 mots)",
})

LENGTH_MAX_TOKENS = MappingProxyType({
    "short": 400,
    "medium": 800,
    "long": 1500,
})

LANGUAGE_NAMES = MappingProxyType({
    "french": "français",
    "english": "English",
})

VOICE_DESCRIPTIONS = MappingProxyType({
    True: "personnel et authentique",
    False: "objectif et informatif",
})

STORY_PREAMBLE = "Basé sur les informations suivantes, crée un récit de voyage captivant:"
STORY_CLOSING = (
    "Crée un récit qui capture l'essence de ce voyage "
    "et transporte le lecteur dans cette expérience."
)


@dataclass(frozen=True)
class StoryPrompt:
    """Everything the generation service needs for a first-pass story."""

    system: str
    user: str
    max_tokens: int
    temperature: float = STORY_TEMPERATURE


def get_system_prompt(settings: StorySettings) -> str:
    """Build the system instruction from the settings alone."""
    template = load_prompt("story/system")
    return render_prompt(
        template,
        language=LANGUAGE_NAMES[settings.language],
        style=STYLE_DESCRIPTIONS[settings.style],
        mood=MOOD_DESCRIPTIONS[settings.mood],
        length=LENGTH_BANDS[settings.length],
        voice=VOICE_DESCRIPTIONS[settings.personal_touch],
    )


def build_story_prompt(
    context: str,
    settings: StorySettings,
    custom_prompt: Optional[str] = None,
) -> str:
    """Build the user prompt

    Args:
        context: Context block from build_story_context
        settings: Story settings (focus points are read here)
        custom_prompt: Free-text instructions from the user

    Returns:
        User prompt with sections separated by a single blank line
    """
    sections = [STORY_PREAMBLE]

    if context.strip():
        sections.append(context.strip())

    if settings.focus_points:
        sections.append(f"Points à mettre en avant: {', '.join(settings.focus_points)}")

    if custom_prompt and custom_prompt.strip():
        sections.append(f"Instructions personnalisées: {custom_prompt.strip()}")

    sections.append(STORY_CLOSING)
    return "\n\n".join(sections)


def get_max_tokens(length: str) -> int:
    """Output ceiling for a story length; unknown lengths get the medium ceiling."""
    return LENGTH_MAX_TOKENS.get(length, DEFAULT_MAX_TOKENS)


def compose_story_prompt(
    context: str,
    settings: StorySettings,
    custom_prompt: Optional[str] = None,
) -> StoryPrompt:
    """Compose system instruction, user prompt and generation parameters."""
    prompt = StoryPrompt(
        system=get_system_prompt(settings),
        user=build_story_prompt(context, settings, custom_prompt),
        max_tokens=get_max_tokens(settings.length),
    )
    logger.debug(
        "Composed story prompt: style=%s mood=%s length=%s max_tokens=%s",
        settings.style,
        settings.mood,
        settings.length,
        prompt.max_tokens,
    )
    return prompt
