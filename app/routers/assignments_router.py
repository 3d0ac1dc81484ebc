# /app/routers/assignments_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from ..models import assignment_model
from ..services import class_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

@router.get("", response_model=List[assignment_model.Assignment], summary="List Assignments, Optionally for One Class")
async def list_assignments(class_id: Optional[int] = None, db: DatabaseService = Depends(get_db_service)):
    return await class_service.list_assignments(db, class_id=class_id)

@router.post("", response_model=assignment_model.Assignment, status_code=status.HTTP_201_CREATED, summary="Create an Assignment")
async def create_assignment(assignment_create: assignment_model.AssignmentCreate, db: DatabaseService = Depends(get_db_service)):
    return await class_service.create_assignment(db, assignment_create)

@router.put("/{assignment_id}", response_model=assignment_model.Assignment, summary="Update an Assignment")
async def update_assignment(assignment_id: int, assignment_update: assignment_model.AssignmentUpdate, db: DatabaseService = Depends(get_db_service)):
    return await class_service.update_assignment(db, assignment_id, assignment_update)

@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an Assignment")
async def delete_assignment(assignment_id: int, db: DatabaseService = Depends(get_db_service)):
    await class_service.delete_assignment(db, assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
