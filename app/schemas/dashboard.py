"""View models for the document processing dashboard."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ProcessingStatusEnum(str, Enum):
    """Lifecycle state of a processed document."""
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ProcessingRecord(BaseModel):
    """One document run through the classifier, as loaded by the caller."""
    file_name: str = Field(..., min_length=1, max_length=255)
    document_type: str = Field(default="outros", max_length=100)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    processed_at: datetime
    status: ProcessingStatusEnum = ProcessingStatusEnum.COMPLETED
    user_id: Optional[str] = None
    error_message: Optional[str] = None


class DashboardStats(BaseModel):
    total_documents: int = 0
    success_rate: float = 0.0
    active_users: int = 0
    processing_count: int = 0


class RecentActivity(BaseModel):
    file_name: str = ""
    classification: str = ""
    processed_at: Optional[datetime] = None
    file_extension: str = ""
    time_ago: str = ""
    badge_class: str = ""
    icon_class: str = ""


class ChartData(BaseModel):
    # labels[i] pairs with values[i]; builders keep the lengths equal
    labels: list[str] = Field(default_factory=list)
    values: list[int] = Field(default_factory=list)


class TypeStatistic(BaseModel):
    type: str = ""
    count: int = 0
    percentage: float = 0.0
    progress_bar_class: str = ""


class DashboardViewModel(BaseModel):
    stats: DashboardStats = Field(default_factory=DashboardStats)
    recent_activities: list[RecentActivity] = Field(default_factory=list)
    chart_data: ChartData = Field(default_factory=ChartData)
    type_statistics: list[TypeStatistic] = Field(default_factory=list)
