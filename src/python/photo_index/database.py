"""Catalog engine and session helpers.

The CLI works with one process-wide engine built from the ``database``
config section. Tests and embedding code can build their own engine with
create_catalog_engine and hand a plain Session to CatalogStore.
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from photo_index.config import Config
from photo_index.db.models import Base
from photo_index.exceptions import ConfigError

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


def create_catalog_engine(uri: str, echo: bool = False) -> Engine:
    """Create an engine for a catalog database.

    SQLite connections get foreign key enforcement switched on, which
    SQLite leaves off by default.
    """
    engine = create_engine(uri, echo=echo)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def get_engine(config: Optional[Config] = None) -> Engine:
    """Return the process-wide engine, creating it on first use.

    Args:
        config: Config to read ``database.uri`` from; loaded if None

    Raises:
        ConfigError: If no database URI is configured
    """
    global _engine, _SessionFactory

    if _engine is None:
        config = config or Config.load()
        if not config.database.uri:
            raise ConfigError(
                "No database URI configured. Set database.uri in config.yaml, "
                "pass --db-uri or set PHOTO_INDEX_DB_URI."
            )

        _engine = create_catalog_engine(config.database.uri, echo=config.database.echo)
        _SessionFactory = sessionmaker(bind=_engine)

    return _engine


def init_db(engine: Engine) -> None:
    """Create the catalog tables that do not exist yet."""
    Base.metadata.create_all(engine)


def get_session(config: Optional[Config] = None) -> Session:
    """Open a session on the process-wide engine. The caller closes it."""
    if _SessionFactory is None:
        get_engine(config)
    return _SessionFactory()


@contextmanager
def session_scope(config: Optional[Config] = None) -> Generator[Session, None, None]:
    """Session that commits on success, rolls back on error and always closes.

    Example:
        >>> with session_scope(config) as session:
        ...     TreeWalker(root, GroupIndexer(PhotoReconciler(CatalogStore(session), root), root)).index_all()
    """
    session = get_session(config)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def reset_engine() -> None:
    """Dispose of the process-wide engine so the next call builds a new one."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()

    _engine = None
    _SessionFactory = None
