"""
Property Viewing Models
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

VIEWING_STATUSES = ("scheduled", "confirmed", "completed", "cancelled")


class Viewing(Base):
    """A visitor's request to tour a property"""

    __tablename__ = "property_viewings"

    id = Column(Integer, primary_key=True, index=True)

    # Relationships
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Visitor details
    visitor_name = Column(String(255), nullable=False)
    visitor_email = Column(String(320), nullable=False)
    visitor_phone = Column(String(50), nullable=True)

    # Scheduling
    viewing_date = Column(DateTime, nullable=False, index=True)  # naive UTC
    viewing_time = Column(String(10), nullable=False)  # HH:MM format
    duration = Column(Integer, default=30, nullable=False)  # minutes
    notes = Column(Text, nullable=True)

    # Status is set by admins; any status may move to any other
    # scheduled | confirmed | completed | cancelled
    status = Column(String(20), default="scheduled", nullable=False, index=True)
    cancellation_reason = Column(Text, nullable=True)
    reminder_sent = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    property = relationship("Property", back_populates="viewings")
