from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from officeflow.config import SETTINGS

engine = create_engine(SETTINGS.database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
Base = declarative_base()


def init_db() -> None:
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


def create_schema() -> None:
    # registers the tables on Base.metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(engine)


def drop_schema() -> None:
    from . import models  # noqa: F401

    Base.metadata.drop_all(engine)
