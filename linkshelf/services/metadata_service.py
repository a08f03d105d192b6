"""
Extraction des métadonnées d'une page (titre, description, image, domaine, texte).

Ordre de priorité (le premier non vide gagne):
- titre:       og:title -> <title> -> premier <h1> -> "Untitled"
- description: og:description -> meta description -> ""
- image:       og:image -> twitter:image -> None
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse
import logging

from bs4 import BeautifulSoup

from linkshelf.services.fetch_service import fetch_html, FetchError
from linkshelf.services.result import Ok, Degraded, Outcome

logger = logging.getLogger(__name__)

PAGE_TEXT_LIMIT = 3000
FALLBACK_TITLE = "Unable to fetch title"


@dataclass(frozen=True)
class PageMetadata:
    title: str
    description: str
    image: Optional[str]
    domain: str
    page_text: str


def get_domain(url: str) -> str:
    parsed = urlparse(url)
    host = parsed.hostname or parsed.netloc
    if host.startswith("www."):
        host = host[len("www."):]
    return host


def _meta_content(soup: BeautifulSoup, attr: str, key: str) -> str:
    tag = soup.find("meta", attrs={attr: key})
    if tag and tag.get("content"):
        return tag["content"].strip()
    return ""


def _tag_text(soup: BeautifulSoup, name: str) -> str:
    tag = soup.find(name)
    # texte des enfants séparé par des espaces, blancs fusionnés
    return " ".join(tag.get_text(" ").split()) if tag else ""


def _visible_text(soup: BeautifulSoup) -> str:
    root = soup.body or soup
    for element in root.find_all(["script", "style", "noscript", "template"]):
        element.decompose()
    # \s+ -> " "
    text = " ".join(root.get_text(" ").split())
    return text[:PAGE_TEXT_LIMIT]


def parse_metadata(html: str, url: str) -> PageMetadata:
    soup = BeautifulSoup(html, "html.parser")

    title = (
        _meta_content(soup, "property", "og:title")
        or _tag_text(soup, "title")
        or _tag_text(soup, "h1")
        or "Untitled"
    )

    description = (
        _meta_content(soup, "property", "og:description")
        or _meta_content(soup, "name", "description")
    )

    image = (
        _meta_content(soup, "property", "og:image")
        or _meta_content(soup, "name", "twitter:image")
        or None
    )

    return PageMetadata(
        title=title,
        description=description,
        image=image,
        domain=get_domain(url),
        page_text=_visible_text(soup),
    )


def fallback_metadata(url: str) -> PageMetadata:
    return PageMetadata(
        title=FALLBACK_TITLE,
        description="",
        image=None,
        domain=get_domain(url),
        page_text="",
    )


def extract_metadata(url: str) -> Outcome[PageMetadata]:
    """Fetch + parse. Ne lève jamais: en cas d'échec on renvoie le repli."""
    try:
        html = fetch_html(url)
    except FetchError as e:
        logger.warning(f"Fetch failed for {url}: {e}")
        return Degraded(fallback_metadata(url), reason=str(e))

    try:
        return Ok(parse_metadata(html, url))
    except Exception as e:
        logger.warning(f"Metadata parsing failed for {url}: {e}")
        return Degraded(fallback_metadata(url), reason=f"Parsing failed: {e}")
