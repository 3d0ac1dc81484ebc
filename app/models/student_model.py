# /app/models/student_model.py

# --- Core Imports ---
import re
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

from .common import IdRef, reject_null

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# --- Core Enumerations ---
class GradeLevel(str, Enum):
    K = "K"
    GRADE_1 = "1"; GRADE_2 = "2"; GRADE_3 = "3"; GRADE_4 = "4"
    GRADE_5 = "5"; GRADE_6 = "6"; GRADE_7 = "7"; GRADE_8 = "8"
    GRADE_9 = "9"; GRADE_10 = "10"; GRADE_11 = "11"; GRADE_12 = "12"

class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


def _check_email(value: Optional[str]) -> Optional[str]:
    # An empty form field means "no email", not an invalid one.
    if value is None or value == "":
        return None
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Valid email is required")
    return value


# --- Model Definitions ---

class StudentBase(BaseModel):
    """
    The base model for a Student. Contains fields common to create and read operations.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    firstName: str = Field(..., min_length=1, description="First name is required.")
    lastName: str = Field(..., min_length=1, description="Last name is required.")
    gradeLevel: GradeLevel = Field(..., description="K or 1 through 12.")
    dateOfBirth: date
    email: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    classIds: IdRef = Field(default_factory=list, description="The classes this student is enrolled in.")
    gender: Optional[Gender] = Field(default=None)

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, v):
        return _check_email(v)

class StudentCreate(StudentBase):
    """The model used for creating a new student. Inherits all fields from the base."""
    pass

class StudentUpdate(BaseModel):
    """
    The model for updating a student. All fields are optional to allow for
    partial updates.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    firstName: Optional[str] = Field(default=None, min_length=1)
    lastName: Optional[str] = Field(default=None, min_length=1)
    gradeLevel: Optional[GradeLevel] = None
    dateOfBirth: Optional[date] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    classIds: Optional[IdRef] = None
    gender: Optional[Gender] = None

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, v):
        return _check_email(v)

    @field_validator("firstName", "lastName", "gradeLevel", "dateOfBirth")
    @classmethod
    def required_fields_cannot_be_cleared(cls, v):
        return reject_null(v)

class Student(BaseModel):
    """
    The full representation of a Student record, as it is stored and returned
    by the API. Read models are lenient: stored records are returned as they are.
    """
    model_config = ConfigDict(from_attributes=True)

    Id: int = Field(..., description="The unique, store-assigned identifier for the student.")
    firstName: str
    lastName: str
    gradeLevel: str
    dateOfBirth: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    classIds: Optional[IdRef] = None
    gender: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
