from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings, settings


def engine_options(cfg: Settings) -> dict:
    url = make_url(cfg.database_url)
    if url.get_backend_name() == "sqlite":
        return {}
    return {
        "pool_pre_ping": True,
        "pool_size": cfg.DB_POOL_MAX,
        "max_overflow": 0,
        "pool_timeout": cfg.DB_POOL_ACQUIRE_TIMEOUT,
        "pool_recycle": cfg.DB_POOL_IDLE_TIMEOUT,
    }


def build_engine(cfg: Settings = settings) -> Engine:
    return create_engine(cfg.database_url, **engine_options(cfg))


engine = build_engine()

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)

def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
