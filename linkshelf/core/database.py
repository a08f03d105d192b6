from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Handle vers la BD, injecté dans l'app.

    open() au démarrage (engine + tables), close() à l'arrêt.
    Les routes récupèrent une session via get_db().
    """

    def __init__(self, url: str):
        self.url = url
        self.engine = None
        self.SessionLocal = None

    def open(self):
        connect_args = {"check_same_thread": False} if self.url.startswith("sqlite") else {}
        self.engine = create_engine(self.url, echo=False, connect_args=connect_args)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database opened")

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database closed")
        self.engine = None
        self.SessionLocal = None

    def session(self) -> Session:
        if self.SessionLocal is None:
            raise RuntimeError("Database is not open")
        return self.SessionLocal()


def get_db(request: Request):
    """Dépendance sessionDB"""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
