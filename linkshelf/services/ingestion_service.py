"""
Pipeline d'ingestion d'un lien.

validate -> doublon ? -> fetch + extraction -> tags/résumé IA -> insert

Seules la validation et le doublon font échouer la requête. Le fetch et
l'IA dégradent (titre de repli, pas de tags, "Summary unavailable") mais
le lien est toujours enregistré.
"""

from typing import Optional, Tuple
from urllib.parse import urlparse
import logging

from sqlalchemy.orm import Session

from linkshelf.core.deps import AuthenticatedUser
from linkshelf.core.errors import ConflictError, ValidationError
from linkshelf.models.link import Link
from linkshelf.services import link_service
from linkshelf.services.ai_service import generate_ai_content, SUMMARY_UNAVAILABLE
from linkshelf.services.metadata_service import extract_metadata

logger = logging.getLogger(__name__)


def validate_url(url: Optional[str]) -> str:
    if not url or not url.strip():
        raise ValidationError("URL is required")

    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError:
        raise ValidationError("Invalid URL format")

    # URL absolue: schéma + hôte
    if not parsed.scheme or not parsed.netloc:
        raise ValidationError("Invalid URL format")
    return url


def save_link(db: Session, user: AuthenticatedUser, url: Optional[str]) -> Tuple[Link, str]:
    """Retourne le lien créé + le résumé (non stocké)"""

    # ÉTAPE 1: validation, aucun I/O avant
    url = validate_url(url)

    # ÉTAPE 2: doublon, avant les appels coûteux
    if link_service.find_by_url(db, user.id, url):
        raise ConflictError("Link already saved")

    # ÉTAPE 3: métadonnées
    metadata_outcome = extract_metadata(url)
    metadata = metadata_outcome.value

    # ÉTAPE 4: tags + résumé
    ai_outcome = generate_ai_content(metadata.title, metadata.description, metadata.page_text, url)
    ai_content = ai_outcome.value

    # ÉTAPE 5: insert (la contrainte unique couvre la course entre 2 et 5)
    link = link_service.create_link(db, user.id, url, metadata, ai_content.tags)

    logger.info(
        f"Link {link.id} saved for user {user.id} "
        f"(metadata degraded={metadata_outcome.degraded}, ai degraded={ai_outcome.degraded})"
    )
    return link, ai_content.summary


def get_link_details(db: Session, user: AuthenticatedUser, link_id: int) -> Tuple[Link, str]:
    """Lien stocké + résumé régénéré à la volée depuis la page actuelle"""
    link = link_service.get_link(db, user.id, link_id)

    try:
        metadata = extract_metadata(link.url).value
        ai_outcome = generate_ai_content(link.title or "", link.description or "", metadata.page_text, link.url)
        summary = ai_outcome.value.summary
    except Exception:
        # le détail doit rester consultable même si le rafraîchissement plante
        logger.exception(f"Summary refresh failed for link {link.id}")
        summary = SUMMARY_UNAVAILABLE

    return link, summary
