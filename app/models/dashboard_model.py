# /app/models/dashboard_model.py

# --- Core Imports ---
from typing import List, Literal

from pydantic import BaseModel, Field

# --- Model Definitions ---

class DashboardStats(BaseModel):
    """
    The four headline numbers on the dashboard's stat cards.
    """
    totalStudents: int = Field(..., examples=[112])
    totalClasses: int = Field(..., examples=[4])
    averageGrade: float = Field(
        ...,
        description="Mean grade percentage across all grades, one decimal. 0 when no grades exist.",
        examples=[84.3]
    )
    attendanceRate: float = Field(
        ...,
        description="Percentage of today's records marked Present, one decimal. 100 when nothing is recorded today.",
        examples=[96.0]
    )

class ActivityItem(BaseModel):
    """One line of the dashboard's recent-activity feed."""
    type: Literal["grade", "attendance"]
    message: str
    time: str = Field(..., description="A fixed display label, not a computed age.")
    icon: str

class UpcomingEvent(BaseModel):
    """A calendar entry on the dashboard. The list is fixed, not read from the store."""
    title: str
    date: str = Field(..., examples=["Next Monday"], description="A display label, not a calendar date.")
    type: Literal["meeting", "exam", "assignment"]
    icon: str

class DashboardSummary(BaseModel):
    stats: DashboardStats
    recentActivity: List[ActivityItem]
    upcomingEvents: List[UpcomingEvent] = Field(default_factory=list)
