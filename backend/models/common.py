"""Common database utilities and base models"""

import datetime
import logging
from typing import Generator

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import create_engine, Session

logger = logging.getLogger("acadnet.db")

_engine = None


def get_engine():  # pragma: no cover
    global _engine
    if _engine is None:
        from settings import DATABASE_URL

        connect_args = {}
        if DATABASE_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(DATABASE_URL, connect_args=connect_args)
        logger.debug(f"Database engine on {_engine.url.render_as_string()}")
    return _engine


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def get_session() -> Generator[Session, None, None]:  # pragma: no cover
    """Get database session for FastAPI dependency, always closes session."""
    session = Session(get_engine(), expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()


def parse_bool(bool_str: str | bool):
    if isinstance(bool_str, str):
        return bool_str.lower() in ("true", "1")
    return bool(bool_str)


def parse_int(value: str | int | None, default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)
