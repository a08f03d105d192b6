from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from linkshelf.core.database import Base
from linkshelf.core import security

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    links = relationship("Link", back_populates="user", cascade="all, delete-orphan")

    def set_password(self, password: str):
        self.password_hash = security.hash_password(password)

    def verify_password(self, password: str) -> bool:
        return security.verify_password(password, self.password_hash)
