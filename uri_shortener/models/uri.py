from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from uri_shortener.models.base import Base


class Prefix(Base):
    """
    Short-link base under which cipher tokens are served.

    Stored without a trailing slash. Rows are created lazily by the first
    shorten() under a new prefix and never updated.
    """
    __tablename__ = "prefix"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    # unique=True + index=True creates a single unique index
    prefix = Column(String, nullable=False, unique=True, index=True)

    uris = relationship("URIRecord", back_populates="prefix", passive_deletes=True)


class URIRecord(Base):
    """
    A long URI and the cipher token derived from its row id.

    - uri is unique across the whole store, not per prefix
    - cipher is NULL until the first shorten() completes for the row
    - created is a unix timestamp written once at insert
    """
    __tablename__ = "uris"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    prefix_id = Column(
        Integer,
        ForeignKey("prefix.id", ondelete="CASCADE"),
        nullable=False
    )
    uri = Column(String, nullable=False, unique=True, index=True)
    cipher = Column(String, nullable=True, unique=True, index=True)
    created = Column(Integer, nullable=True, index=True)

    prefix = relationship("Prefix", back_populates="uris")
