# fallback.py
import logging
from types import MappingProxyType

from database import FetchResult, FetchStatus

logger = logging.getLogger(__name__)

# Shown whenever the database is down or holds no students. Never written back.
SAMPLE_STUDENTS = (
    MappingProxyType({
        "id": "686f66da1801707c14d09e60",
        "name": "Alice Johnson",
        "age": 20,
        "course": "Computer Science",
    }),
    MappingProxyType({
        "id": "686f66da1801707c14d09e61",
        "name": "Bob Smith",
        "age": 22,
        "course": "Mechanical Engineering",
    }),
    MappingProxyType({
        "id": "686f66da1801707c14d09e62",
        "name": "Charlie Lee",
        "age": 19,
        "course": "Business Administration",
    }),
)


def sample_students() -> list:
    return [dict(student) for student in SAMPLE_STUDENTS]


def find_sample_student(student_id: str):
    for student in SAMPLE_STUDENTS:
        if student["id"] == student_id:
            return dict(student)
    return None


def degrade(result: FetchResult) -> list:
    """Students to show for a listing: the fetched ones, or the samples if the fetch failed or came back empty."""
    if result.status is FetchStatus.OK:
        return list(result.students)
    if result.status is FetchStatus.FAILED:
        logger.warning(f"Serving sample students, database read failed: {result.error}")
    else:
        logger.info("Serving sample students, no students stored yet")
    return sample_students()
