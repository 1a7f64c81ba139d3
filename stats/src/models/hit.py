"""
Hit model: one recorded request of a URI by an address.
"""

from sqlalchemy import Column, Integer, String, DateTime, Index

from stats.src.models import Base


class Hit(Base):
    """
    Attributes:
        id: Primary key
        app: Name of the application that served the request
        uri: Requested URI, e.g. /events/12
        ip: Caller address
        timestamp: When the request was made

    Indexes:
        - uri, timestamp (for windowed counts per URI)
    """

    __tablename__ = "hits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    app = Column(String(255), nullable=False)
    uri = Column(String(512), nullable=False)
    ip = Column(String(64), nullable=False)
    timestamp = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_hits_uri_timestamp", "uri", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<Hit(id={self.id}, app='{self.app}', uri='{self.uri}', ip='{self.ip}')>"
