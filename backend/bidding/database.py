# backend/bidding/database.py
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from .config import settings
from .utils.logging import db_logger

database_url = make_url(settings.DATABASE_URL)
# Never log the password part of the URL
db_logger.info(f"Connecting to database: {database_url.render_as_string(hide_password=True)}")

# SQLite connections are shared with the threadpool that runs sync route code
connect_args = {"check_same_thread": False} if database_url.get_backend_name() == "sqlite" else {}

engine = create_engine(database_url, connect_args=connect_args, echo=False)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Request-scoped session, closed once the response is sent"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
