# eco9/schemas.py
from datetime import datetime
from typing import Optional, List, Literal

from pydantic import BaseModel, Field

SummaryRange = Literal["daily", "weekly", "monthly", "all"]


class ImpactIn(BaseModel):
    category: str = Field(min_length=1)
    value: float
    unit: str = Field(min_length=1)
    subtype: Optional[str] = None


class ImpactOut(BaseModel):
    co2_saved: float
    water_conserved: float


class MultiplierOut(BaseModel):
    co2_factor: float
    water_factor: float
    per_unit: str


class Activity(BaseModel):
    id: str
    user_id: str
    category: str
    subtype: Optional[str] = None
    value: float
    unit: str
    timestamp: datetime
    notes: Optional[str] = None
    impact: ImpactOut


class ActivityIn(BaseModel):
    user_id: str = Field(min_length=1)
    category: str = Field(min_length=1)
    value: float
    unit: str = Field(min_length=1)
    subtype: Optional[str] = None
    timestamp: Optional[datetime] = None
    notes: Optional[str] = None


class ActivityUpdate(BaseModel):
    category: Optional[str] = Field(default=None, min_length=1)
    value: Optional[float] = None
    unit: Optional[str] = Field(default=None, min_length=1)
    subtype: Optional[str] = None
    timestamp: Optional[datetime] = None
    notes: Optional[str] = None


class DailyImpact(BaseModel):
    date: str
    co2_saved: float
    water_conserved: float


class ImpactSummary(BaseModel):
    range: SummaryRange
    co2_saved: float
    water_conserved: float
    activity_count: int
    historical_data: List[DailyImpact] = []
