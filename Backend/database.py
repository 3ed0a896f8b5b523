import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool

from config import DATABASE_URL


def build_engine(url: str):
    # NullPool: each request gets a fresh connection, no pool sharing across
    # Gunicorn forked workers. Prevents SSL errors on Render.
    connect_args = {}
    if url.startswith("sqlite"):
        # Sessions cross threads when the availability check runs detached.
        connect_args["check_same_thread"] = False
    return create_engine(
        url,
        poolclass=NullPool,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def generate_id() -> str:
    return uuid.uuid4().hex
