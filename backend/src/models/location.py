"""
Location model for event venues.

A Location is a plain lat/lon value owned by exactly one Event. It is never
shared between events; updating an event's location replaces the row.
"""

from sqlalchemy import Column, Integer, Float

from backend.src.models import Base


class Location(Base):
    """
    Geographic point of an event.

    Attributes:
        id: Primary key
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees
    """

    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, lat={self.lat}, lon={self.lon})>"
