from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Generator, Optional

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from jewelgst.config import settings


def _load_schema_sql() -> str:
    schema_path = Path(__file__).with_name("schema.sql")
    return schema_path.read_text(encoding="utf-8")


class PostgresClient:
    """
    SQLAlchemy engine + session factory over the shop's invoice database.
    Any SQLAlchemy URL works; tests point it at in-memory SQLite.
    """

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None) -> None:
        self.database_url = database_url or settings.DATABASE_URL
        self.engine: Engine = engine or create_engine(self.database_url, pool_pre_ping=True)
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def init_schema(self) -> None:
        """Create the read tables (local development and tests only)."""
        schema_sql = _load_schema_sql()
        with self.engine.begin() as conn:
            for stmt in [s.strip() for s in schema_sql.split(";") if s.strip()]:
                conn.execute(text(stmt))
        logger.info("Invoice schema initialized")

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


@lru_cache(maxsize=1)
def get_postgres_client() -> PostgresClient:
    return PostgresClient()
