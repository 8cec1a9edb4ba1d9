from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy import inspect, text
from sqlalchemy.pool import StaticPool
import time
import logging

from films import config

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False):
    if database_url.startswith("sqlite"):
        # in-memory databases must share one connection across threads
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args={"connect_timeout": 10},
        echo=echo
    )


engine = build_engine(config.DATABASE_URL, echo=config.SQL_ECHO)


def create_db_and_tables(bind=None):
    # import registers the table models on SQLModel.metadata
    from films import models  # noqa: F401

    bind = bind or engine
    if not inspect(bind).has_table("film"):
        SQLModel.metadata.create_all(bind)
        logger.info("Database tables created")


def wait_for_db(bind=None):
    bind = bind or engine
    max_retries = config.DB_CONNECT_RETRIES
    retry_delay = config.DB_RETRY_DELAY

    for attempt in range(1, max_retries + 1):
        try:
            logger.info(f"Attempt {attempt}/{max_retries}: Connecting to DB...")
            with Session(bind) as session:
                session.execute(text("SELECT 1"))
            logger.info(f"Connected to {bind.dialect.name} database")
            create_db_and_tables(bind)
            return
        except Exception as e:
            logger.error(f"Connection failed: {type(e).__name__}: {str(e)}")
            if attempt == max_retries:
                raise RuntimeError(f"Failed to connect to DB after {max_retries} attempts")
            time.sleep(retry_delay)


def get_session():
    with Session(engine) as session:
        yield session
