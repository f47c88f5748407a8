from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def sqlite_url(path: str | Path) -> str:
    return f"sqlite:///{Path(path)}"


def create_sqlite_engine(path: str | Path) -> Engine:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        sqlite_url(path),
        connect_args={"check_same_thread": False},
    )


def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
