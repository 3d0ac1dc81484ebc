# /app/routers/attendance_router.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends

from ..models.attendance_model import AttendanceMark, AttendanceRecord, AttendanceRegister
from ..services import attendance_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

@router.get("/{class_id}", response_model=AttendanceRegister, summary="Get a Class's Attendance Register for a Day")
async def get_register(class_id: int, on_date: Optional[date] = None, db: DatabaseService = Depends(get_db_service)):
    return await attendance_service.load_register(db, class_id, on_date or date.today())

@router.post("/{class_id}/mark", response_model=AttendanceRecord, summary="Mark One Student's Attendance")
async def mark_attendance(class_id: int, mark: AttendanceMark, db: DatabaseService = Depends(get_db_service)):
    return await attendance_service.mark_attendance(
        db, class_id=class_id, student_id=mark.studentId, on_date=mark.date, status=mark.status, notes=mark.notes
    )

@router.post("/{class_id}/mark-all-present", response_model=List[AttendanceRecord], summary="Mark Every Enrolled Student Present")
async def mark_all_present(class_id: int, on_date: Optional[date] = None, db: DatabaseService = Depends(get_db_service)):
    return await attendance_service.mark_all_present(db, class_id, on_date or date.today())
