"""Prompt template loading with variant support."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

# Templates ship inside the package; PROMPTS_DIR points at an external copy
BUNDLED_PROMPTS_ROOT = Path(__file__).resolve().parent / "templates"
PROMPTS_ROOT = Path(os.getenv("PROMPTS_DIR") or BUNDLED_PROMPTS_ROOT)
logger = logging.getLogger(__name__)


def _resolve_variant(explicit_variant: Optional[str]) -> str:
    variant = (explicit_variant or os.getenv("PROMPT_VARIANT") or "default").strip().lower()
    return variant or "default"


def _template_path(prompt_name: str, variant: str) -> Path:
    prompt_key = "_".join(Path(prompt_name).parts)
    return PROMPTS_ROOT / variant / f"{variant}_{prompt_key}.txt"


@lru_cache(maxsize=32)
def load_prompt(prompt_name: str, variant: Optional[str] = None) -> str:
    """Load a prompt template by logical name.

    Args:
        prompt_name: Hierarchical prompt identifier (e.g. "story/system").
        variant: Optional override for PROMPT_VARIANT.

    Returns:
        Template text. Variants missing on disk fall back to "default".
    """
    variant_key = _resolve_variant(variant)
    candidate = _template_path(prompt_name, variant_key)
    path = candidate if candidate.exists() else _template_path(prompt_name, "default")

    if not path.exists():
        raise FileNotFoundError(
            f"Prompt template not found for {prompt_name} (variant={variant_key})"
        )

    if path != candidate:
        logger.info(
            "Prompt variant '%s' missing for %s. Falling back to default.",
            variant_key,
            prompt_name,
        )

    return path.read_text(encoding="utf-8")


def render_prompt(template: str, **values: Optional[str]) -> str:
    """Fill template placeholders; None renders as an empty string."""
    return template.format(
        **{key: "" if value is None else str(value) for key, value in values.items()}
    ).strip()
