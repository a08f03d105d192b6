"""
Récupération du HTML brut d'une page.
"""

import requests
import logging

from linkshelf.core.config import settings

logger = logging.getLogger(__name__)

# Certains sites refusent les clients "bot", on se fait passer pour Chrome
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class FetchError(Exception):
    """Réseau, timeout, statut non-2xx ou réponse illisible: même catégorie"""


def fetch_html(url: str, timeout: int = None) -> str:
    timeout = timeout or settings.FETCH_TIMEOUT
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
    }

    logger.debug(f"GET {url} (timeout={timeout}s)")
    try:
        response = requests.get(url, headers=headers, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
        return response.text
    except requests.exceptions.Timeout as e:
        raise FetchError(f"Request timed out after {timeout}s") from e
    except requests.exceptions.HTTPError as e:
        status_code = getattr(e.response, "status_code", "unknown")
        raise FetchError(f"HTTP error: {status_code}") from e
    except (requests.exceptions.RequestException, UnicodeDecodeError) as e:
        raise FetchError(f"Request failed: {e}") from e
