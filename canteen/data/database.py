# canteen/data/database.py
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from canteen.utils.settings import DATABASE_URL
from canteen.utils.retry import db_connect_retry
from canteen.utils.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def build_engine(url: str):
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True, pool_size=20, max_overflow=0)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        #baza w pamieci - jedno polaczenie dzielone miedzy watkami
        kwargs["poolclass"] = StaticPool

    sqlite_engine = create_engine(url, **kwargs)

    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@db_connect_retry()
def check_connection():
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Database connection established")


def init_db():
    # import modeli, zeby zarejestrowaly sie w Base.metadata
    import canteen.data.models  # noqa: F401

    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=engine)


def dispose_engine():
    logger.info("Closing database connections")
    engine.dispose()
