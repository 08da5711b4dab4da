"""Tests for story prompt composition"""

import pytest

from travelstory.compose import (
    LENGTH_BANDS,
    STORY_CLOSING,
    STORY_PREAMBLE,
    STORY_TEMPERATURE,
    build_story_prompt,
    compose_story_prompt,
    get_max_tokens,
    get_system_prompt,
)
from travelstory.models import LANGUAGES, LENGTHS, MOODS, STYLES, StorySettings


@pytest.mark.parametrize("length,band", [
    ("short", "200-300 mots"),
    ("medium", "400-600 mots"),
    ("long", "800-1200 mots"),
])
def test_system_prompt_contains_length_band(length, band):
    """Test the word-count band for the length appears verbatim"""
    system_prompt = get_system_prompt(StorySettings(length=length))
    assert band in system_prompt
    assert LENGTH_BANDS[length] in system_prompt


def test_system_prompt_covers_every_setting_combination():
    """Test every style/mood/length/language renders with its band"""
    for style in STYLES:
        for mood in MOODS:
            for length in LENGTHS:
                for language in LANGUAGES:
                    settings = StorySettings(style=style, mood=mood, length=length, language=language)
                    assert LENGTH_BANDS[length] in get_system_prompt(settings)


def test_system_prompt_language_and_voice():
    """Test language name and personal voice are reflected"""
    french = get_system_prompt(StorySettings(language="french", personal_touch=True))
    english = get_system_prompt(StorySettings(language="english", personal_touch=False))

    assert "en français" in french
    assert "personnel et authentique" in french
    assert "en English" in english
    assert "objectif et informatif" in english


def test_system_prompt_style_and_mood():
    """Test style and mood descriptions are looked up"""
    system_prompt = get_system_prompt(StorySettings(style="diary", mood="nostalgic"))
    assert "un journal intime personnel et authentique" in system_prompt
    assert "nostalgique et émotionnel" in system_prompt


def test_user_prompt_section_order():
    """Test preamble, context, focus, custom instructions and closing order"""
    settings = StorySettings(focus_points=["gastronomie", "temples"])
    prompt = build_story_prompt("Voyage: Tokyo", settings, "Parle des trains")

    assert prompt == (
        f"{STORY_PREAMBLE}\n\n"
        "Voyage: Tokyo\n\n"
        "Points à mettre en avant: gastronomie, temples\n\n"
        "Instructions personnalisées: Parle des trains\n\n"
        f"{STORY_CLOSING}"
    )


def test_user_prompt_omits_empty_sections():
    """Test missing optional sections leave no extra blank lines"""
    prompt = build_story_prompt("", StorySettings(), "   ")

    assert prompt == f"{STORY_PREAMBLE}\n\n{STORY_CLOSING}"
    assert "\n\n\n" not in prompt
    assert "Points à mettre en avant" not in prompt
    assert "Instructions personnalisées" not in prompt


@pytest.mark.parametrize("length,tokens", [
    ("short", 400),
    ("medium", 800),
    ("long", 1500),
    ("epic", 800),
])
def test_get_max_tokens(length, tokens):
    """Test fixed size ceilings with medium as default"""
    assert get_max_tokens(length) == tokens


def test_compose_story_prompt_bundles_parameters():
    """Test composed prompt carries ceiling and temperature"""
    settings = StorySettings(length="long")
    prompt = compose_story_prompt("Voyage: Lima", settings)

    assert prompt.max_tokens == 1500
    assert prompt.temperature == STORY_TEMPERATURE == 0.7
    assert "Voyage: Lima" in prompt.user
    assert "Voyage: Lima" not in prompt.system


def test_system_prompt_ignores_context_and_instructions():
    """Test the system instruction depends on the settings only"""
    settings = StorySettings(style="social", mood="exciting", length="short")
    first = compose_story_prompt("Voyage: Rome", settings, "Parle des fontaines")
    second = compose_story_prompt("Voyage: Oslo", settings)

    assert first.system == second.system == get_system_prompt(settings)
