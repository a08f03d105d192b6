from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from linkshelf.core.database import get_db
from linkshelf.core.deps import AuthenticatedUser, get_current_user
from linkshelf.core.errors import ValidationError
from linkshelf.schemas.link import (
    LinkCreate,
    LinkDetail,
    LinkDetailResponse,
    LinkListResponse,
    LinkSearchResponse,
    MessageResponse,
    SaveLinkResponse,
)
from linkshelf.services import link_service
from linkshelf.services.ingestion_service import save_link, get_link_details

router = APIRouter(prefix="/links", tags=["links"])

# au-delà, l'OFFSET SQL déborde un BIGINT
MAX_PAGE = 1_000_000
MAX_LIMIT = 100
MAX_LINK_ID = 2 ** 63 - 1


def parse_positive_int(value: Optional[str], default: int, maximum: int) -> int:
    # "abc", "0", "-2" -> valeur par défaut, trop grand -> plafonné
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number <= 0:
        return default
    return min(number, maximum)


def parse_link_id(link_id: str) -> int:
    try:
        number = int(link_id)
    except ValueError:
        raise ValidationError("Invalid link ID")
    if not 0 < number <= MAX_LINK_ID:
        raise ValidationError("Invalid link ID")
    return number


@router.post("", response_model=SaveLinkResponse, status_code=status.HTTP_201_CREATED)
def create_link(link_data: LinkCreate, db: Session = Depends(get_db), current_user: AuthenticatedUser = Depends(get_current_user)):
    """
    Sauver une URL.

    1. Valider l'URL (400 sinon, rien n'est fetché)
    2. Refuser un doublon pour cet user (400 "Link already saved")
    3. Extraire titre/description/image de la page
    4. Demander tags + résumé à l'IA
    5. Enregistrer et retourner le lien avec le résumé

    Si la page ou l'IA ne répond pas, le lien est quand même créé.
    """
    link, summary = save_link(db, current_user, link_data.url)

    return {
        "message": "Link saved successfully",
        "link": LinkDetail.model_validate(link).model_copy(update={"summary": summary}),
    }


@router.get("", response_model=LinkListResponse)
def list_links(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Liens de l'user, du plus récent au plus ancien, paginés"""
    links, pagination = link_service.list_links(
        db,
        current_user.id,
        page=parse_positive_int(page, link_service.DEFAULT_PAGE, MAX_PAGE),
        limit=parse_positive_int(limit, link_service.DEFAULT_LIMIT, MAX_LIMIT),
    )
    return {"links": links, "pagination": pagination}


@router.get("/search", response_model=LinkSearchResponse)
def search_links(
    q: Optional[str] = Query(None),
    tags: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """
    Recherche dans titre, description, domaine et URL (insensible à la casse).

    tags=Video -> seulement les liens qui ont exactement ce tag
    """
    links, pagination = link_service.search_links(
        db,
        current_user.id,
        query_text=q,
        tag=tags,
        page=parse_positive_int(page, link_service.DEFAULT_PAGE, MAX_PAGE),
        limit=parse_positive_int(limit, link_service.DEFAULT_LIMIT, MAX_LIMIT),
    )
    return {
        "links": links,
        "pagination": pagination,
        "search_query": q,
        "tag_filter": tags,
    }


@router.get("/{link_id}", response_model=LinkDetailResponse)
def get_link(link_id: str, db: Session = Depends(get_db), current_user: AuthenticatedUser = Depends(get_current_user)):
    """
    Un lien + un résumé frais (la page est re-fetchée à chaque appel).

    404 si le lien n'existe pas OU appartient à un autre user.
    """
    link, summary = get_link_details(db, current_user, parse_link_id(link_id))
    return {"link": LinkDetail.model_validate(link).model_copy(update={"summary": summary})}


@router.delete("/{link_id}", response_model=MessageResponse)
def delete_link(link_id: str, db: Session = Depends(get_db), current_user: AuthenticatedUser = Depends(get_current_user)):
    link_service.delete_link(db, current_user.id, parse_link_id(link_id))
    return {"message": "Link deleted successfully"}
