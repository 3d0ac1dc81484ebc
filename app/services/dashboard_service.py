# /app/services/dashboard_service.py

"""
Builds the dashboard view model: the four headline stats, the
recent-activity feed, and a fixed list of upcoming events.

`build_stats` and `build_recent_activity` are pure functions over records that
have already been fetched; `get_dashboard_summary` does the fetching.
"""

import asyncio
import logging
from datetime import date
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

# Import the Pydantic models to ensure our output matches the data contract.
from ..models.dashboard_model import ActivityItem, DashboardStats, DashboardSummary, UpcomingEvent
from .database_service import DatabaseService
from . import analytics
from .relations import filter_by_date, index_by_id, normalize_id_ref

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 5
RECENT_GRADE_WINDOW = 3
RECENT_ATTENDANCE_WINDOW = 2

GRADE_TIME_LABEL = "2 hours ago"
ATTENDANCE_TIME_LABEL = "1 hour ago"

UPCOMING_EVENTS = (
    {"title": "Parent-Teacher Conferences", "date": "Next Monday", "type": "meeting", "icon": "Calendar"},
    {"title": "Midterm Exams", "date": "Next Week", "type": "exam", "icon": "FileText"},
    {"title": "Science Fair Projects Due", "date": "Friday", "type": "assignment", "icon": "Beaker"},
)


# --- Stats ---

def build_stats(
    students: Sequence[Mapping],
    classes: Sequence[Mapping],
    grades: Sequence[Mapping],
    attendance: Sequence[Mapping],
    today: Optional[date] = None,
) -> Dict:
    """
    Computes the dashboard's headline numbers.

    averageGrade is the mean over every grade (not a mean of student means).
    attendanceRate only looks at records dated `today`; pass `today=None` when
    `attendance` is already restricted to the day.
    """
    attendance_today = attendance if today is None else filter_by_date(attendance, today)
    return {
        "totalStudents": len(students),
        "totalClasses": len(classes),
        "averageGrade": round(analytics.mean_grade_percentage(grades), 1),
        "attendanceRate": round(analytics.attendance_rate(attendance_today), 1),
    }


# --- Recent Activity ---

def _student_name(student: Mapping) -> str:
    return f"{student.get('firstName', '')} {student.get('lastName', '')}".strip()


class RecentActivityFeed:
    """
    A finite, restartable view over the latest grade and attendance events.

    Nothing is cached: every iteration rebuilds the feed from the records it
    was given, so iterating twice yields the same items.
    """

    def __init__(self, grades, attendance, students, limit: int = RECENT_ACTIVITY_LIMIT, today: Optional[date] = None):
        self.grades = grades
        self.attendance = attendance
        self.students = students
        self.limit = limit
        self.today = today

    def _events(self) -> Iterator[Dict]:
        students_by_id = index_by_id(self.students)

        # Most recently appended grades first; insertion order, not grade date.
        for grade in reversed(list(self.grades)[-RECENT_GRADE_WINDOW:]):
            student = students_by_id.get(normalize_id_ref(grade.get("studentId")))
            if student is None:
                logger.warning("Recent activity: grade %s has no resolvable student.", grade.get("Id"))
                continue
            yield {
                "type": "grade",
                "message": f"Grade recorded for {_student_name(student)}",
                "time": GRADE_TIME_LABEL,
                "icon": "BookOpen",
            }

        todays = self.attendance if self.today is None else filter_by_date(self.attendance, self.today)
        for record in list(todays)[-RECENT_ATTENDANCE_WINDOW:]:
            student = students_by_id.get(normalize_id_ref(record.get("studentId")))
            if student is None:
                logger.warning("Recent activity: attendance %s has no resolvable student.", record.get("Id"))
                continue
            yield {
                "type": "attendance",
                "message": f"{_student_name(student)} marked {str(record.get('status', '')).lower()}",
                "time": ATTENDANCE_TIME_LABEL,
                "icon": "CheckSquare",
            }

    def __iter__(self) -> Iterator[Dict]:
        if self.limit <= 0:
            return
        for count, item in enumerate(self._events(), start=1):
            yield item
            if count >= self.limit:
                return


def build_recent_activity(
    grades: Sequence[Mapping],
    attendance: Sequence[Mapping],
    students: Sequence[Mapping],
    limit: int = RECENT_ACTIVITY_LIMIT,
    today: Optional[date] = None,
) -> RecentActivityFeed:
    return RecentActivityFeed(grades, attendance, students, limit=limit, today=today)


# --- Core Public Function ---

async def get_dashboard_summary(db: DatabaseService, today: Optional[date] = None) -> DashboardSummary:
    """
    Loads every collection concurrently and assembles the dashboard view model.

    Args:
        db: The DatabaseService, provided by dependency injection.
        today: The day used for attendance figures. Defaults to the local date.
    """
    today = today or date.today()
    try:
        students, grades, attendance, classes = await asyncio.gather(
            db.student_repo.get_all(),
            db.grade_repo.get_all(),
            db.attendance_repo.get_all(),
            db.class_repo.get_all(),
        )
    except Exception:
        logger.exception("Failed to load dashboard data")
        raise

    stats = build_stats(students, classes, grades, attendance, today=today)
    activity = build_recent_activity(grades, attendance, students, today=today)
    return DashboardSummary(
        stats=DashboardStats(**stats),
        recentActivity=[ActivityItem(**item) for item in activity],
        upcomingEvents=[UpcomingEvent(**event) for event in UPCOMING_EVENTS],
    )
