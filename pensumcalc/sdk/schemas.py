"""Pydantic schemas for school-year files.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in school-year files cause clear errors rather than silent ignoring.
References between sections (teacher codes, payroll type codes, ...) are
checked by the loader, not here.
"""

from datetime import date
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# Catalog
# =============================================================================


class SchoolYearInfo(BaseModel):
    """School year header."""

    model_config = ConfigDict(extra="forbid")

    code: str
    description: str = ""
    weeks: int = Field(..., gt=0, description="School weeks; divides yearly posting lessons")
    calculation_mode: Union[int, str] = Field(
        ..., description="Mode id (1, 2, 3, 99) or code (P, PAI, LAI, H)"
    )
    semester1_start: date
    semester2_start: date
    default_payroll_type: Optional[str] = Field(
        default=None, description="Payroll type code that absorbs the saldo in historic mode"
    )

    @model_validator(mode="after")
    def check_semesters(self) -> "SchoolYearInfo":
        if self.semester2_start <= self.semester1_start:
            raise ValueError("semester2_start must be after semester1_start")
        return self


class PayrollTypeSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str
    description: str = ""
    order: int = 0
    lesson_based: bool = False
    weekly_lessons: float = Field(default=0, ge=0, description="Lessons of a full position")
    percent_per_lesson: Optional[float] = Field(default=None, gt=0)
    saldo_resolving_order: Optional[int] = None

    @model_validator(mode="after")
    def check_conversion(self) -> "PayrollTypeSchema":
        if self.lesson_based and not self.weekly_lessons and self.percent_per_lesson is None:
            raise ValueError(
                f"lesson based payroll type '{self.code}' needs weekly_lessons or percent_per_lesson"
            )
        return self


class PoolTypeSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str
    description: str = ""
    payroll_type: str
    order: int = 0


class ThesisTypeSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str
    description: str = ""
    percent: float = Field(..., ge=0, description="Percent per thesis")
    payroll_type: str


class PostingTypeSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str
    description: str = ""
    payroll_type: str
    percent: bool = Field(default=False, description="True: values are percent, else lessons")


# =============================================================================
# People and contributions
# =============================================================================


class TeacherSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str
    first_name: str = ""
    last_name: str = ""
    employee_number: str = ""
    birthday: Optional[date] = None


class EmploymentSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    teacher: str
    payment1: float = 0
    payment2: float = 0
    opening_balance: float = 0
    age_relief_factor1: Optional[float] = Field(default=None, ge=0)
    age_relief_factor2: Optional[float] = Field(default=None, ge=0)


class CourseSchema(BaseModel):
    """Course; `teachers` applies to both semesters unless overridden."""

    model_config = ConfigDict(extra="forbid")

    subject: str
    payroll_type: str
    grade: str = ""
    school_classes: List[str] = Field(default_factory=list)
    lessons1: float = Field(default=0, ge=0)
    lessons2: float = Field(default=0, ge=0)
    teachers: List[str] = Field(default_factory=list)
    teachers1: Optional[List[str]] = None
    teachers2: Optional[List[str]] = None
    cancelled: bool = False


class PoolEntrySchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    teacher: str
    type: str
    description: str = ""
    percent1: float = 0
    percent2: float = 0


class ThesisEntrySchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    teacher: str
    type: str
    count: float = Field(default=0, ge=0)


class PostingDetailSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str
    value: float = 0


class PostingSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    teacher: str
    description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    details: List[PostingDetailSchema] = Field(default_factory=list)


# =============================================================================
# File
# =============================================================================


class SchoolYearFile(BaseModel):
    """A complete school-year file."""

    model_config = ConfigDict(extra="forbid")

    school_year: SchoolYearInfo
    payroll_types: List[PayrollTypeSchema] = Field(default_factory=list)
    pool_types: List[PoolTypeSchema] = Field(default_factory=list)
    thesis_types: List[ThesisTypeSchema] = Field(default_factory=list)
    posting_types: List[PostingTypeSchema] = Field(default_factory=list)
    teachers: List[TeacherSchema] = Field(default_factory=list)
    employments: List[EmploymentSchema] = Field(default_factory=list)
    courses: List[CourseSchema] = Field(default_factory=list)
    pool_entries: List[PoolEntrySchema] = Field(default_factory=list)
    thesis_entries: List[ThesisEntrySchema] = Field(default_factory=list)
    postings: List[PostingSchema] = Field(default_factory=list)
