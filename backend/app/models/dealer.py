"""
Dealer database model.

A dealer is an account that owns zero or more car listings.
"""

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.orm import relationship
from backend.app.db.session import Base
from backend.app.models.identifiers import new_id, utcnow


class Dealer(Base):
    """
    Dealer model for authentication and the public dealer directory.

    ``location`` is stored as a document:
    {address, city, state, country, coordinates: {latitude, longitude}}.
    The password hash never leaves the service.
    """
    __tablename__ = "dealers"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    whatsapp = Column(String(50), nullable=False)
    location = Column(JSON, nullable=False)
    profile_image = Column(String(1000), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    cars = relationship("Car", back_populates="dealer", lazy="raise")

    def __repr__(self):
        return f"<Dealer(id={self.id}, name='{self.name}', email='{self.email}')>"
