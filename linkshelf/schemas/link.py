from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import List, Optional

# Le frontend consomme du camelCase (createdAt, totalPages, ...)
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class LinkCreate(CamelModel):
    """Sauver une URL, le reste est extrait côté serveur"""
    url: Optional[str] = None

class LinkResponse(CamelModel):
    """Lien retourné"""
    id: int
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    domain: str
    tags: List[str] = []
    created_at: datetime
    updated_at: datetime

class LinkDetail(LinkResponse):
    # résumé régénéré à chaque fois, jamais stocké
    summary: str = "Summary unavailable"

class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_links: int
    has_next_page: bool
    has_prev_page: bool

class LinkListResponse(CamelModel):
    links: List[LinkResponse]
    pagination: Pagination

class LinkSearchResponse(LinkListResponse):
    search_query: Optional[str] = None
    tag_filter: Optional[str] = None

class SaveLinkResponse(CamelModel):
    message: str
    link: LinkDetail

class LinkDetailResponse(CamelModel):
    link: LinkDetail

class MessageResponse(CamelModel):
    message: str
