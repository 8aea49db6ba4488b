"""
SQLAlchemy wiring for the SQL link store.

The engine is built from DATABASE_URL when the SQL store is created,
not at import time, so importing models never touches the database.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker


Base = declarative_base()


def create_session_factory(database_url: str) -> sessionmaker:
    """
    Create the engine, make sure tables exist, and return a session factory.
    
    Args:
        database_url: Any SQLAlchemy database URL
        
    Returns:
        sessionmaker bound to the new engine
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        # FastAPI may run sync store calls from different threads
        connect_args["check_same_thread"] = False
    
    engine = create_engine(database_url, connect_args=connect_args)
    
    # Import models to ensure they're registered with Base
    from shortlinks_app.models.link import Link  # noqa: F401
    
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
