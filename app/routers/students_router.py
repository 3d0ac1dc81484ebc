# /app/routers/students_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from ..models import student_model
from ..models.detail_model import PerformancePoint, StudentDetail
from ..services import student_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

# --- STUDENT COLLECTION ENDPOINTS (/api/students) ---

@router.get("", response_model=List[student_model.Student], summary="List Students, Optionally Filtered by a Search Term")
async def list_students(search: Optional[str] = None, db: DatabaseService = Depends(get_db_service)):
    return await student_service.list_students(db, search=search)

@router.post("", response_model=student_model.Student, status_code=status.HTTP_201_CREATED, summary="Create a Student")
async def create_student(student_create: student_model.StudentCreate, db: DatabaseService = Depends(get_db_service)):
    return await student_service.create_student(db, student_create)

# --- INDIVIDUAL STUDENT ENDPOINTS (/api/students/{student_id}) ---

@router.get("/{student_id}", response_model=student_model.Student, summary="Get a Single Student")
async def get_student(student_id: int, db: DatabaseService = Depends(get_db_service)):
    return await student_service.get_student(db, student_id)

@router.put("/{student_id}", response_model=student_model.Student, summary="Update a Student")
async def update_student(student_id: int, student_update: student_model.StudentUpdate, db: DatabaseService = Depends(get_db_service)):
    return await student_service.update_student(db, student_id, student_update)

@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Student")
async def delete_student(student_id: int, db: DatabaseService = Depends(get_db_service)):
    await student_service.delete_student(db, student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{student_id}/detail", response_model=StudentDetail, summary="Get the Student Detail View")
async def get_student_detail(student_id: int, db: DatabaseService = Depends(get_db_service)):
    return await student_service.get_student_detail(db, student_id)

@router.get("/{student_id}/performance", response_model=List[PerformancePoint], summary="Get the Student's Grade Percentages Over Time")
async def get_performance(student_id: int, db: DatabaseService = Depends(get_db_service)):
    # Fails with 404 for an unknown student rather than returning an empty series.
    await student_service.get_student(db, student_id)
    return await student_service.get_performance_series(db, student_id)
