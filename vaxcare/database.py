# vaxcare/database.py
import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the engine (and its bounded connection pool) for one application.

    Built by the app factory, opened in the lifespan handler and closed on
    shutdown. Routers never touch it directly; they receive sessions via
    ``get_db``.
    """

    def __init__(self, url: str, pool_size: int = 10, create_tables: bool = True):
        self.url = url
        self.pool_size = pool_size
        self.create_tables = create_tables
        self.engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None

    def open(self) -> None:
        url = make_url(self.url)
        if url.get_backend_name() == "sqlite":
            engine = create_engine(url, connect_args={"check_same_thread": False})
        else:
            engine = create_engine(
                url,
                pool_size=self.pool_size,
                max_overflow=0,
                pool_pre_ping=True,
            )
        if self.create_tables:
            # register the mapped tables before create_all
            from . import models  # noqa: F401
            Base.metadata.create_all(bind=engine)
        self.engine = engine
        self._sessionmaker = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        logger.info("Database opened: %s", url.render_as_string(hide_password=True))

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database closed")
        self.engine = None
        self._sessionmaker = None

    def session(self) -> Session:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not open")
        return self._sessionmaker()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
