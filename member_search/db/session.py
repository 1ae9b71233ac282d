from typing import Any
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from ..core.config import Settings, settings


def engine_options(config: Settings) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": config.SQL_ECHO, "future": True}
    if config.DATABASE_URL.startswith("sqlite"):
        # connections cross threads under the ASGI server
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = config.POOL_SIZE
        options["max_overflow"] = config.MAX_OVERFLOW
        options["pool_pre_ping"] = config.POOL_PRE_PING
    return options


engine = create_engine(settings.DATABASE_URL, **engine_options(settings))
# one session per request, never shared
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
