"""Pydantic models validating study plan and subject input before simulation."""

import uuid
from datetime import date, datetime, time, timezone

from pydantic import BaseModel, Field, field_validator, model_validator

from models import StudyPlan, Subject


def _to_naive_datetime(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class StudyPlanInput(BaseModel):
    """Exam name, study period and daily hour budget as entered by the user."""

    exam_name: str = Field(..., alias="examName",
                           description="Name of the exam being prepared for")
    study_start_date: datetime = Field(..., alias="studyStartDate",
                                       description="First study day (ISO-8601)")
    study_end_date: datetime = Field(..., alias="studyEndDate",
                                     description="Last study day / exam day (ISO-8601)")
    daily_study_hours: float = Field(
        ...,
        alias="dailyStudyHours",
        description="Hours available for study per day",
        gt=0
    )

    @field_validator('exam_name')
    @classmethod
    def validate_exam_name(cls, v: str) -> str:
        """Reject blank exam names."""
        if not v.strip():
            raise ValueError("examName must not be empty")
        return v.strip()

    @field_validator('study_start_date', 'study_end_date', mode='before')
    @classmethod
    def coerce_date(cls, v):
        """Accept plain dates as midnight datetimes."""
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.min)
        return v

    @field_validator('study_start_date', 'study_end_date')
    @classmethod
    def drop_timezone(cls, v: datetime) -> datetime:
        """Store everything as naive UTC so start and end can be subtracted."""
        return _to_naive_datetime(v)

    @model_validator(mode='after')
    def validate_period(self) -> "StudyPlanInput":
        if self.study_end_date <= self.study_start_date:
            raise ValueError("studyEndDate must be after studyStartDate")
        return self

    def to_domain(self) -> StudyPlan:
        return StudyPlan(
            exam_name=self.exam_name,
            study_start_date=self.study_start_date,
            study_end_date=self.study_end_date,
            daily_study_hours=self.daily_study_hours,
        )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "examName": "Bar Exam",
                "studyStartDate": "2025-03-01T00:00:00",
                "studyEndDate": "2025-03-31T00:00:00",
                "dailyStudyHours": 4
            }
        }


class SubjectInput(BaseModel):
    """One subject to review before the exam."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex,
                    description="Stable identifier, only used for keying")
    name: str = Field(..., description="Subject name")
    total_load: float = Field(
        ...,
        alias="totalLoad",
        description="Amount of material (e.g. pages)",
        ge=0
    )
    load_unit: str = Field(default="pages", alias="loadUnit",
                           description="Display unit of totalLoad")
    study_speed_per_page: float = Field(
        default=10,
        alias="studySpeedPerPage",
        description="Minutes needed per unit of totalLoad",
        ge=0
    )
    priority: int = Field(
        default=3,
        description="Importance (1=lowest, 5=highest)",
        ge=1,
        le=5
    )
    target_rounds: int = Field(
        default=3,
        alias="targetRounds",
        description="Desired number of complete review passes",
        ge=1
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("subject name must not be empty")
        return v.strip()

    def to_domain(self) -> Subject:
        return Subject(
            id=self.id,
            name=self.name,
            total_load=self.total_load,
            load_unit=self.load_unit,
            study_speed_per_page=self.study_speed_per_page,
            priority=self.priority,
            target_rounds=self.target_rounds,
        )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": "civil-law",
                "name": "Civil Law",
                "totalLoad": 600,
                "loadUnit": "pages",
                "studySpeedPerPage": 3,
                "priority": 5,
                "targetRounds": 3
            }
        }
