# models/student.py
import math
import dataclasses
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaValidationError

Course = Literal[
    "Computer Science",
    "Mechanical Engineering",
    "Electrical Engineering",
    "Business Administration",
    "Civil Engineering",
    "Medical Science",
]

COURSES = get_args(Course)

MIN_NAME_LENGTH = 2
MIN_AGE = 16
MAX_AGE = 100

NAME_REQUIRED = f"Name is required and must be at least {MIN_NAME_LENGTH} characters"
AGE_REQUIRED = f"Age is required and must be between {MIN_AGE} and {MAX_AGE}"
COURSE_REQUIRED = "Course is required"

RESPONSE_FIELDS = ("name", "age", "course", "createdAt", "updatedAt")


class StudentDocument(BaseModel):
    """Rules every stored student must satisfy. Applied by the store on each write."""
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=MIN_NAME_LENGTH)
    age: int = Field(ge=MIN_AGE, le=MAX_AGE)
    course: Course


class StudentUpdate(BaseModel):
    # Unset fields stay untouched; an explicit null fails like any other bad value
    model_config = ConfigDict(extra="ignore")

    name: str = Field(None, min_length=MIN_NAME_LENGTH)
    age: int = Field(None, ge=MIN_AGE, le=MAX_AGE)
    course: Course = None


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    value: dict = dataclasses.field(default_factory=dict)
    field: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def valid(cls, value: dict) -> "ValidationResult":
        return cls(ok=True, value=value)

    @classmethod
    def invalid(cls, field_name: str, message: str) -> "ValidationResult":
        return cls(ok=False, field=field_name, message=message)


def coerce_age(value: Any):
    """Turn an int, float or numeric string into a number, or None if it isn't one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            return int(number)
    return number


def check_new_student(payload: dict) -> ValidationResult:
    """Pre-check a create payload: name, then age, then course, stopping at the first failure.

    The course whitelist is left to StudentDocument, so an unknown course passes here
    and is rejected by the store when it writes.
    """
    name = payload.get("name")
    if not isinstance(name, str) or len(name) < MIN_NAME_LENGTH:
        return ValidationResult.invalid("name", NAME_REQUIRED)

    age = coerce_age(payload.get("age"))
    if age is None or age < MIN_AGE or age > MAX_AGE:
        return ValidationResult.invalid("age", AGE_REQUIRED)

    course = payload.get("course")
    if not course:
        return ValidationResult.invalid("course", COURSE_REQUIRED)

    return ValidationResult.valid({"name": name, "age": age, "course": course})


def describe_schema_errors(exc: SchemaValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}")
    return "Student validation failed: " + ", ".join(parts)


def utc_now() -> datetime:
    # MongoDB keeps millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def student_out(document: dict) -> dict:
    """Shape a stored document for a response: `_id` becomes a string `id`.

    No validation here. Records written before the current rules (a fractional age,
    a missing field) are passed through as stored.
    """
    student = {}
    if document.get("_id") is not None:
        student["id"] = str(document["_id"])
    for key in RESPONSE_FIELDS:
        if document.get(key) is not None:
            student[key] = document[key]
    return student
