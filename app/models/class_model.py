# /app/models/class_model.py

from typing import List, Optional, Union

from pydantic import BaseModel, Field, ConfigDict, field_validator

from .common import IdRef, reject_null
from .student_model import Student


class ClassBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="Class name is required.")
    subject: str = Field(..., min_length=1, description="Subject is required.")
    room: str = Field(default="")
    schedule: str = Field(default="", examples=["Mon/Wed/Fri 9:00-9:50"])
    studentIds: IdRef = Field(default_factory=list)

class ClassCreate(ClassBase):
    pass

class ClassUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1)
    subject: Optional[str] = Field(default=None, min_length=1)
    room: Optional[str] = None
    schedule: Optional[str] = None
    studentIds: Optional[IdRef] = None

    @field_validator("name", "subject")
    @classmethod
    def required_fields_cannot_be_cleared(cls, v):
        return reject_null(v)

class Class(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    Id: int
    name: str
    subject: Optional[str] = None
    room: Optional[str] = None
    schedule: Optional[str] = None
    studentIds: Optional[IdRef] = None

class ClassSummary(Class):
    """A class enriched with its enrolment count and grade average for list views."""
    studentCount: int = Field(..., description="Students enrolled through either the class studentIds or their own classIds.")
    classAverage: float = Field(..., description="Mean grade percentage; 0 when the class has no grades.")

class ClassRoster(BaseModel):
    classInfo: Class
    students: List[Student]
    averages: dict = Field(default_factory=dict, description="Per-student average keyed by student Id.")
