# /app/models/assignment_model.py

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

from .common import IdRef, reject_null


class AssignmentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    classId: IdRef = Field(..., description="The class this assignment belongs to.")
    maxScore: float = Field(..., gt=0)
    dueDate: Optional[date] = None

class AssignmentUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1)
    classId: Optional[IdRef] = None
    maxScore: Optional[float] = Field(default=None, gt=0)
    dueDate: Optional[date] = None

    @field_validator("name", "classId", "maxScore")
    @classmethod
    def required_fields_cannot_be_cleared(cls, v):
        return reject_null(v)

class Assignment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    Id: int
    name: str
    classId: Optional[IdRef] = None
    maxScore: float
    dueDate: Optional[str] = None
