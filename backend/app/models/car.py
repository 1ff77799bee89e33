"""
Car listing database model.

Each listing is owned by exactly one dealer.
"""

from sqlalchemy import Column, String, Integer, Float, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from backend.app.db.session import Base
from backend.app.models.enums import CarStatus
from backend.app.models.identifiers import new_id, utcnow


class Car(Base):
    """
    Car-for-sale listing.

    Enum attributes are stored as their plain string values so that the
    listing query layer can filter on arbitrary strings.
    """
    __tablename__ = "cars"

    id = Column(String(36), primary_key=True, default=new_id)

    # Ownership - listing belongs to one dealer
    dealer_id = Column(String(36), ForeignKey("dealers.id"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    make = Column(String(100), nullable=False, index=True)
    model = Column(String(100), nullable=False, index=True)
    year = Column(Integer, nullable=False, index=True)
    transmission = Column(String(30), nullable=False)
    engine_size = Column(String(50), nullable=False)
    condition = Column(String(30), nullable=False)
    price = Column(Float, nullable=False, index=True)
    mileage = Column(Float, nullable=False)
    fuel_type = Column(String(30), nullable=False)
    body_type = Column(String(30), nullable=False)
    color = Column(String(50), nullable=False)
    features = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)
    status = Column(String(30), nullable=False, default=CarStatus.AVAILABLE.value, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    dealer = relationship("Dealer", back_populates="cars", lazy="raise")

    def __repr__(self):
        return f"<Car(id={self.id}, name='{self.name}', dealer_id={self.dealer_id}, status='{self.status}')>"
