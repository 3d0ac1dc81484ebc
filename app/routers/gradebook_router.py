# /app/routers/gradebook_router.py

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ..models.grade_model import Grade, GradeEntry, GradeGrid
from ..services import gradebook_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

@router.get("/{class_id}", response_model=GradeGrid, summary="Get the Grade Grid for a Class")
async def get_grade_grid(class_id: int, db: DatabaseService = Depends(get_db_service)):
    return await gradebook_service.load_grade_grid(db, class_id)

@router.post("/{class_id}/grades", response_model=Grade, summary="Enter or Change One Student's Score")
async def save_grade(class_id: int, entry: GradeEntry, db: DatabaseService = Depends(get_db_service)):
    return await gradebook_service.save_grade(
        db, class_id=class_id, student_id=entry.studentId, assignment_id=entry.assignmentId, score=entry.score
    )

@router.get("/{class_id}/export", summary="Export the Grade Grid as CSV", response_class=StreamingResponse)
async def export_grade_grid(class_id: int, db: DatabaseService = Depends(get_db_service)):
    csv_string = await gradebook_service.export_grade_grid_csv(db, class_id)
    file_name = f"grades_class_{class_id}.csv"
    return StreamingResponse(iter([csv_string]), media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={file_name}"})
