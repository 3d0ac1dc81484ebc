# /app/routers/classes_router.py

from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..models import class_model
from ..services import class_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

# --- CLASS COLLECTION ENDPOINTS (/api/classes) ---

@router.get("", response_model=List[class_model.ClassSummary], summary="Get All Classes with Student Counts")
async def get_all_classes(db: DatabaseService = Depends(get_db_service)):
    return await class_service.get_all_classes_with_summary(db)

@router.post("", response_model=class_model.Class, status_code=status.HTTP_201_CREATED, summary="Create a New Class")
async def create_new_class(class_create: class_model.ClassCreate, db: DatabaseService = Depends(get_db_service)):
    return await class_service.create_class(db, class_create)

# --- INDIVIDUAL CLASS RESOURCE ENDPOINTS (/api/classes/{class_id}) ---

@router.get("/{class_id}", response_model=class_model.Class, summary="Get a Single Class")
async def get_class_by_id(class_id: int, db: DatabaseService = Depends(get_db_service)):
    return await class_service.get_class(db, class_id)

@router.put("/{class_id}", response_model=class_model.Class, summary="Update a Class")
async def update_class_details(class_id: int, class_update: class_model.ClassUpdate, db: DatabaseService = Depends(get_db_service)):
    return await class_service.update_class(db, class_id, class_update)

@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Class")
async def delete_class(class_id: int, db: DatabaseService = Depends(get_db_service)):
    await class_service.delete_class_by_id(db, class_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{class_id}/roster", response_model=class_model.ClassRoster, summary="Get the Students Enrolled in a Class")
async def get_class_roster(class_id: int, db: DatabaseService = Depends(get_db_service)):
    return await class_service.get_class_roster(db, class_id)
