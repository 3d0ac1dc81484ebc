# /app/models/grade_model.py

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, ConfigDict

from .common import IdRef
from .assignment_model import Assignment
from .student_model import Student


class Grade(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    Id: int
    studentId: Optional[IdRef] = None
    classId: Optional[IdRef] = None
    assignmentId: Optional[IdRef] = None
    score: float
    maxScore: float
    date: Optional[str] = None

class GradeEntry(BaseModel):
    """
    A single cell edit in the grade grid. The score is range-checked against
    the assignment's maxScore by the gradebook service, not here.
    """
    studentId: int
    assignmentId: int
    score: float

class GradeGridRow(BaseModel):
    student: Student
    # Score per assignment Id; None where no grade has been entered yet.
    scores: Dict[int, Optional[float]]
    average: Union[float, str] = Field(..., description='Mean percentage, or "N/A" with no grades.')
    averageDisplay: str

class GradeGrid(BaseModel):
    classId: int
    assignments: List[Assignment]
    rows: List[GradeGridRow]
