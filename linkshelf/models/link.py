"""Link model + tags ordonnés"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from linkshelf.core.database import Base


class Link(Base):
    __tablename__ = "links"
    # contrainte en BD: deux saves concurrents de la même URL ne passent pas
    __table_args__ = (UniqueConstraint("user_id", "url", name="uq_links_user_url"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    url = Column(String, nullable=False)
    title = Column(String, nullable=True)
    description = Column(String, nullable=True)
    image = Column(String, nullable=True)
    domain = Column(String, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="links")
    tag_entries = relationship(
        "LinkTag",
        order_by="LinkTag.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def tags(self):
        return [entry.name for entry in self.tag_entries]


class LinkTag(Base):
    __tablename__ = "link_tags"

    id = Column(Integer, primary_key=True)
    link_id = Column(Integer, ForeignKey("links.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False, index=True)  # une des TAG_CATEGORIES
