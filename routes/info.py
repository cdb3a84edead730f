# routes/info.py
import logging
from fastapi import APIRouter, Depends
from database import Database, get_database
from fallback import degrade, sample_students

logger = logging.getLogger(__name__)

router = APIRouter(tags=["info"])

WELCOME = "Student Management System is running!"
SERVER_STATUS = "Server is active"

ENDPOINTS = {
    "GET /": "API info with students (this page)",
    "GET /students": "Get all students",
    "GET /students/{id}": "Get single student",
    "POST /students": "Create new student",
    "PUT /students/{id}": "Update student",
    "DELETE /students/{id}": "Delete student",
}

EXAMPLE_PAYLOAD = {
    "createStudent": {
        "name": "Student Name",
        "age": 20,
        "course": "Computer Science",
    },
}


def database_label(connected: bool) -> str:
    return "Connected" if connected else "Disconnected"


@router.get("/")
async def get_info(database: Database = Depends(get_database)):
    try:
        students = degrade(await database.students.find_all())
        return {
            "message": WELCOME,
            "status": SERVER_STATUS,
            "database": database_label(database.is_connected),
            "totalStudents": len(students),
            "students": students,
            "endpoints": ENDPOINTS,
            "examplePayload": EXAMPLE_PAYLOAD,
        }
    except Exception as e:
        logger.error(f"Info page fell back to sample students: {e}", exc_info=True)
        students = sample_students()
        return {
            "message": WELCOME,
            "status": SERVER_STATUS,
            "database": database_label(False),
            "totalStudents": len(students),
            "students": students,
        }
