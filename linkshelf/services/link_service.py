# IMPORTS
from math import ceil
from typing import List, Optional, Tuple
import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, Query

from linkshelf.core.errors import ConflictError, InternalError, NotFoundError
from linkshelf.models.link import Link, LinkTag
from linkshelf.schemas.link import Pagination
from linkshelf.services.metadata_service import PageMetadata

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    total_pages = ceil(total / limit)
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_links=total,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


def _paginate(query: Query, page: int, limit: int) -> Tuple[List[Link], Pagination]:
    total = query.count()
    # les plus récents d'abord, id pour départager les égalités
    links = query.order_by(Link.created_at.desc(), Link.id.desc()) \
        .offset((page - 1) * limit) \
        .limit(limit) \
        .all()
    return links, build_pagination(page, limit, total)


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


# func 1: get_link()
def get_link(db: Session, user_id: int, link_id: int) -> Link:
    link = db.query(Link).filter(Link.id == link_id, Link.user_id == user_id).first()
    if not link:
        raise NotFoundError("Link not found")
    return link


# func 2: find_by_url()
def find_by_url(db: Session, user_id: int, url: str) -> Optional[Link]:
    return db.query(Link).filter(Link.user_id == user_id, Link.url == url).first()


# func 3: create_link()
def create_link(db: Session, user_id: int, url: str, metadata: PageMetadata, tags: List[str]) -> Link:
    link = Link(
        user_id=user_id,
        url=url,
        title=metadata.title,
        description=metadata.description,
        image=metadata.image,
        domain=metadata.domain,
    )
    link.tag_entries = [LinkTag(name=tag, position=i) for i, tag in enumerate(tags)]

    db.add(link)
    try:
        db.commit()
    except IntegrityError:
        # un autre save de la même URL est passé entre le check et l'insert
        db.rollback()
        logger.info(f"Concurrent duplicate save rejected for user {user_id}: {url}")
        raise ConflictError("Link already saved")
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Store error while saving {url} for user {user_id}")
        raise InternalError() from e

    db.refresh(link)
    return link


# func 4: list_links()
def list_links(db: Session, user_id: int, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> Tuple[List[Link], Pagination]:
    query = db.query(Link).filter(Link.user_id == user_id)
    return _paginate(query, page, limit)


# func 5: search_links()
def search_links(
    db: Session,
    user_id: int,
    query_text: Optional[str] = None,
    tag: Optional[str] = None,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
) -> Tuple[List[Link], Pagination]:
    query = db.query(Link).filter(Link.user_id == user_id)

    if query_text:
        pattern = _like_pattern(query_text)
        query = query.filter(or_(
            Link.title.ilike(pattern, escape="\\"),
            Link.description.ilike(pattern, escape="\\"),
            Link.domain.ilike(pattern, escape="\\"),
            Link.url.ilike(pattern, escape="\\"),
        ))

    if tag:
        # appartenance exacte
        query = query.filter(Link.tag_entries.any(LinkTag.name == tag))

    return _paginate(query, page, limit)


# func 6: delete_link()
def delete_link(db: Session, user_id: int, link_id: int) -> None:
    link = get_link(db, user_id, link_id)
    db.delete(link)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Store error while deleting link {link_id} for user {user_id}")
        raise InternalError() from e
