from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResultRecord(CamelModel):
    id: str
    regno: str
    subject: str
    marks: float
    grade: str
    created_at: datetime


class ResultCreate(BaseModel):
    # Checked by the router so missing/invalid fields get readable messages
    regno: Optional[str] = None
    subject: Optional[str] = None
    marks: Any = None


class ResultUpdate(BaseModel):
    regno: Optional[str] = None
    subject: Optional[str] = None
    marks: Any = None


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    message: str


class StatusResponse(BaseModel):
    status: str


class ResultResponse(BaseModel):
    message: str
    result: ResultRecord


class ResultListResponse(BaseModel):
    results: List[ResultRecord]
    count: int


class StudentResultsResponse(BaseModel):
    regno: str
    results: List[ResultRecord]
    count: int


class GradePointEntry(CamelModel):
    subject: str
    marks: float
    grade: str
    point: float


class GPAResponse(CamelModel):
    regno: str
    gpa: str = Field(..., description="GPA formatted to two decimal places.")
    total_subjects: int
    grade_points: List[GradePointEntry]


class DashboardResponse(CamelModel):
    total_students: int
    total_subjects: int
    average_gpa: float = Field(..., alias="averageGPA")
    best_grade: str
    recent_results: List[ResultRecord]
