"""
Audit Log Database Model.

Tracks security-relevant dealer actions (authentication and listing changes).
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from backend.app.db.session import Base
from backend.app.models.identifiers import utcnow


class AuditLog(Base):
    """
    Audit log model for tracking security events and listing mutations.

    Events logged:
    - DEALER_REGISTERED / PROFILE_UPDATED / PASSWORD_CHANGED
    - LOGIN_SUCCESS / LOGIN_FAILED
    - CAR_CREATED / CAR_UPDATED / CAR_STATUS_CHANGED / CAR_DELETED
    - IMAGES_UPLOADED / IMAGE_DELETED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for anonymous attempts)
    actor_id = Column(String(36), index=True, nullable=True)
    actor_email = Column(String(255), nullable=True)

    action = Column(String(100), nullable=False, index=True)

    # What the action touched (car id, image public id, ...)
    target_id = Column(String(255), index=True, nullable=True)

    meta_data = Column(JSON, nullable=True)
    ip_address = Column(String(50), nullable=True)

    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_email}, target={self.target_id})>"
