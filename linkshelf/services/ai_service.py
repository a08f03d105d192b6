"""
Service Gemini - tags + résumé d'une page via l'API REST generateContent
"""

import requests
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
import logging

from linkshelf.core.config import settings
from linkshelf.services.result import Ok, Degraded, Outcome

logger = logging.getLogger(__name__)

# Vocabulaire fermé, le modèle ne peut rien proposer d'autre
TAG_CATEGORIES = [
    "Image",
    "Video",
    "News",
    "Blog",
    "Music",
    "Social Media Post",
]

SUMMARY_UNAVAILABLE = "Summary unavailable"
TAG_CONTEXT_LIMIT = 1000
SUMMARY_CONTEXT_LIMIT = 2000


class AIServiceError(Exception):
    pass


@dataclass(frozen=True)
class AIContent:
    tags: List[str] = field(default_factory=list)
    summary: str = SUMMARY_UNAVAILABLE


def is_ai_configured() -> bool:
    return bool(settings.GEMINI_API_KEY)


def generate_text(prompt: str, model: Optional[str] = None) -> str:
    if not is_ai_configured():
        raise AIServiceError("GEMINI_API_KEY not configured")

    model = model or settings.GEMINI_MODEL
    api_url = f"{settings.GEMINI_BASE_URL}/models/{model}:generateContent"

    start_time = datetime.utcnow()
    try:
        response = requests.post(
            api_url,
            headers={"Content-Type": "application/json", "x-goog-api-key": settings.GEMINI_API_KEY},
            json={"contents": [{"parts": [{"text": prompt}]}]},
            timeout=settings.AI_TIMEOUT
        )
        response.raise_for_status()
        data = response.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        raise AIServiceError(f"Gemini request failed: {e}") from e

    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise AIServiceError("Gemini returned no candidate text") from e

    if not isinstance(text, str):
        raise AIServiceError(f"Gemini returned non-text content: {type(text).__name__}")

    elapsed_ms = int((datetime.utcnow() - start_time).total_seconds() * 1000)
    logger.debug(f"Gemini ({model}) answered in {elapsed_ms}ms")

    return text.strip()


def build_tag_prompt(title: str, description: str, page_text: str, url: str) -> str:
    return f"""Based on the following content, return ONLY the most relevant tags from this EXACT list: {', '.join(TAG_CATEGORIES)}.

Title: {title}
Description: {description}
URL: {url}
Content: {page_text[:TAG_CONTEXT_LIMIT]}

Return only the relevant tag names from the given categories, separated by commas. If none fit perfectly, choose the closest match or return empty."""


def build_summary_prompt(title: str, description: str, page_text: str) -> str:
    return f"""Create a concise 2-3 sentence summary of the following web page content:

Title: {title}
Description: {description}
Content: {page_text[:SUMMARY_CONTEXT_LIMIT]}

Focus on the main points and key information. Keep it informative but brief."""


def parse_tags(text: str) -> List[str]:
    """
    Ne garde que les catégories connues (insensible à la casse),
    avec l'orthographe canonique et sans doublons.
    """
    canonical = {cat.lower(): cat for cat in TAG_CATEGORIES}
    tags = []
    for raw in (text or "").split(","):
        tag = canonical.get(raw.strip().lower())
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def generate_ai_content(title: str, description: str, page_text: str, url: str) -> Outcome[AIContent]:
    # si un des deux appels échoue, on dégrade tout (pas de tags, pas de résumé)
    try:
        tags_text = generate_text(build_tag_prompt(title, description, page_text, url))
        tags = parse_tags(tags_text)

        summary = generate_text(build_summary_prompt(title, description, page_text))
    except AIServiceError as e:
        logger.warning(f"AI content unavailable for {url}: {e}")
        return Degraded(AIContent(), reason=str(e))
    except Exception as e:
        # une réponse inattendue ne doit jamais faire échouer le save
        logger.exception(f"Unexpected AI error for {url}")
        return Degraded(AIContent(), reason=f"Unexpected error: {e}")

    return Ok(AIContent(tags=tags, summary=summary))
