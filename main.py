"""travelstory - AI-powered travel story generation

Main entry point: reads a story request JSON file and writes the story JSON.
"""

import json
import logging
import os
import sys
from typing import Any, Dict

from dotenv import load_dotenv

from travelstory.enhance import enhance_story_with_details, generate_story_title
from travelstory.llm import SUPPORTED_PROVIDERS, LLMClient
from travelstory.story import StoryRequest, generate_travel_story

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _configure_logging():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler('travelstory.log', encoding='utf-8')
        ]
    )


def _parse_flag(env_name: str) -> bool:
    return os.getenv(env_name, "").strip().lower() in _TRUE_VALUES


def _parse_timeout(env_name: str, default: int) -> int:
    value = os.getenv(env_name, "").strip()
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{env_name} must be a positive integer") from exc
    if parsed <= 0:
        raise ValueError(f"{env_name} must be a positive integer")
    return parsed


def load_config() -> Dict[str, Any]:
    """Load configuration from environment variables

    Returns:
        Dictionary with configuration values
    """
    load_dotenv()

    config = {
        'llm_provider': os.getenv('LLM_PROVIDER', 'openai').lower(),
        'llm_timeout': _parse_timeout('LLM_TIMEOUT_SECONDS', 30),
        'input_file': os.getenv('STORY_INPUT_FILE', 'trip.json'),
        'output_file': os.getenv('STORY_OUTPUT_FILE', 'story.json'),
        'enhance': _parse_flag('STORY_ENHANCE'),
        'regenerate_title': _parse_flag('STORY_REGENERATE_TITLE'),
    }

    if config['llm_provider'] not in SUPPORTED_PROVIDERS:
        logger.error(f"Invalid LLM_PROVIDER: {config['llm_provider']}")
        raise ValueError(f"LLM_PROVIDER must be one of {', '.join(SUPPORTED_PROVIDERS)}")

    if config['llm_provider'] == 'openai' and not os.getenv('OPENAI_API_KEY'):
        logger.error("OPENAI_API_KEY not set")
        raise ValueError("OPENAI_API_KEY is required when using OpenAI")

    if config['llm_provider'] == 'anthropic' and not os.getenv('ANTHROPIC_API_KEY'):
        logger.error("ANTHROPIC_API_KEY not set")
        raise ValueError("ANTHROPIC_API_KEY is required when using Anthropic")

    logger.info(f"Configuration loaded: LLM={config['llm_provider']}, "
                f"timeout={config['llm_timeout']}s, "
                f"input={config['input_file']}")

    return config


def load_request(input_file: str) -> StoryRequest:
    """Read a story request ({trip, photos, settings, customPrompt}) from JSON."""
    with open(input_file, 'r', encoding='utf-8') as f:
        return StoryRequest.from_dict(json.load(f))


def save_story(story: Dict[str, Any], output_file: str = "story.json"):
    """Write the story JSON to disk

    Args:
        story: Story dictionary (GeneratedStory.to_dict())
        output_file: Output file path
    """
    try:
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(story, f, ensure_ascii=False, indent=2)
        logger.info(f"Story saved to {output_file}")
    except IOError as e:
        logger.error(f"Failed to save story: {e}")
        raise


def main():
    """Main execution flow"""
    logger.info("=" * 60)
    logger.info("travelstory starting")
    logger.info("=" * 60)

    try:
        config = load_config()
        llm_client = LLMClient(provider=config['llm_provider'], timeout=config['llm_timeout'])

        logger.info(f"Step 1: Loading story request from {config['input_file']}")
        request = load_request(config['input_file'])

        logger.info("Step 2: Generating story")
        story = generate_travel_story(request, llm_client)

        if config['enhance']:
            logger.info("Step 3: Enhancing story with photo details")
            story.content = enhance_story_with_details(story.content, request.photos, llm_client)
        else:
            logger.info("Step 3: Enhancement disabled, skipping")

        if config['regenerate_title']:
            logger.info("Step 4: Regenerating title")
            story.title = generate_story_title(story.content, llm_client, fallback_title=story.title)
        else:
            logger.info("Step 4: Title regeneration disabled, skipping")

        logger.info(f"Step 5: Saving story to {config['output_file']}")
        save_story(story.to_dict(), output_file=config['output_file'])

        logger.info("=" * 60)
        logger.info("travelstory completed successfully")
        logger.info("=" * 60)
        return 0

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        logger.info("=" * 60)
        logger.info("travelstory failed")
        logger.info("=" * 60)
        return 1


if __name__ == "__main__":
    _configure_logging()
    sys.exit(main())
