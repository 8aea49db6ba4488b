from sqlalchemy import Column, String
from shortlinks_app.database.connection import Base


class Link(Base):
    """
    Slug -> destination mapping.
    
    The slug is the primary key, so a second write for the same slug
    replaces the destination. No timestamps or history are kept.
    """
    __tablename__ = "links"

    slug = Column(String, primary_key=True)
    destination = Column(String, nullable=False)
