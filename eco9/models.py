# eco9/models.py
from sqlalchemy import Column, String, Float, DateTime, Text
from datetime import datetime, timezone
from .database import Base
import uuid


def gen_id(prefix):
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def utcnow():
    return datetime.now(timezone.utc)


class Activity(Base):
    __tablename__ = "activities"
    id = Column(String, primary_key=True, default=lambda: gen_id("activity"))
    user_id = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False)  # transport, energy, waste, diet, water, ...
    subtype = Column(String, nullable=True)
    value = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=utcnow)
    notes = Column(Text, nullable=True)
    co2_saved = Column(Float, default=0.0)
    water_conserved = Column(Float, default=0.0)
