# database.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from bson import ObjectId
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import ValidationError as SchemaValidationError
from pymongo import ReturnDocument
from pymongo.errors import ConnectionFailure, PyMongoError

from errors import (
    MalformedIdentifierError,
    NotFoundError,
    PersistenceUnavailableError,
    UnexpectedError,
    ValidationError,
)
from models.student import (
    StudentDocument,
    StudentUpdate,
    describe_schema_errors,
    student_out,
    utc_now,
)

logger = logging.getLogger(__name__)

INVALID_ID = "Invalid student ID"
NOT_FOUND = "Student not found"


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class FetchStatus(Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchResult:
    status: FetchStatus
    students: tuple = ()
    error: Optional[str] = None

    @classmethod
    def of(cls, students: list) -> "FetchResult":
        if not students:
            return cls(FetchStatus.EMPTY)
        return cls(FetchStatus.OK, tuple(students))

    @classmethod
    def failed(cls, error: str) -> "FetchResult":
        return cls(FetchStatus.FAILED, error=error)


def parse_object_id(student_id: str) -> ObjectId:
    if not ObjectId.is_valid(student_id):
        raise MalformedIdentifierError(INVALID_ID)
    return ObjectId(student_id)


class StudentStore:
    """The students collection: find-all, find-by-id and validated create/update/delete."""

    def __init__(self, collection, report_state: Callable[[ConnectionState], None] = None):
        self.collection = collection
        self._report_state = report_state or (lambda state: None)

    def _failure(self, exc: PyMongoError) -> Exception:
        if isinstance(exc, ConnectionFailure):
            self._report_state(ConnectionState.DISCONNECTED)
            return PersistenceUnavailableError(f"Database unavailable: {exc}")
        return UnexpectedError(str(exc))

    async def find_all(self) -> FetchResult:
        try:
            documents = await self.collection.find().to_list(None)
        except PyMongoError as e:
            self._failure(e)
            return FetchResult.failed(str(e))
        self._report_state(ConnectionState.CONNECTED)
        return FetchResult.of([student_out(document) for document in documents])

    async def find_by_id(self, student_id: str) -> dict:
        object_id = parse_object_id(student_id)
        try:
            document = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            raise self._failure(e)
        self._report_state(ConnectionState.CONNECTED)
        if document is None:
            raise NotFoundError(NOT_FOUND)
        return student_out(document)

    async def create(self, fields: dict) -> dict:
        try:
            student = StudentDocument.model_validate(fields)
        except SchemaValidationError as e:
            raise ValidationError(describe_schema_errors(e))

        now = utc_now()
        document = {**student.model_dump(), "createdAt": now, "updatedAt": now}
        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as e:
            raise self._failure(e)
        self._report_state(ConnectionState.CONNECTED)
        document["_id"] = result.inserted_id
        return student_out(document)

    async def find_and_update(self, student_id: str, fields: dict) -> dict:
        object_id = parse_object_id(student_id)
        try:
            changes = StudentUpdate.model_validate(fields).model_dump(exclude_unset=True)
        except SchemaValidationError as e:
            raise ValidationError(describe_schema_errors(e))

        changes["updatedAt"] = utc_now()
        try:
            document = await self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise self._failure(e)
        self._report_state(ConnectionState.CONNECTED)
        if document is None:
            raise NotFoundError(NOT_FOUND)
        return student_out(document)

    async def find_and_delete(self, student_id: str) -> dict:
        object_id = parse_object_id(student_id)
        try:
            document = await self.collection.find_one_and_delete({"_id": object_id})
        except PyMongoError as e:
            raise self._failure(e)
        self._report_state(ConnectionState.CONNECTED)
        if document is None:
            raise NotFoundError(NOT_FOUND)
        return student_out(document)


class Database:
    """Process-wide MongoDB handle. Built once at startup and handed to routes through `get_database`."""

    def __init__(self, client, db_name: str):
        self.client = client
        self.db = client[db_name]
        self.state = ConnectionState.DISCONNECTED
        self.students = StudentStore(self.db["students"], report_state=self._set_state)

    @classmethod
    def from_uri(cls, uri: str, db_name: str, timeout_ms: int = 2000) -> "Database":
        client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
        return cls(client, db_name)

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def _set_state(self, state: ConnectionState) -> None:
        if state is not self.state:
            logger.info(f"MongoDB connection state: {self.state.value} -> {state.value}")
        self.state = state

    async def connect(self) -> bool:
        self._set_state(ConnectionState.CONNECTING)
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            self._set_state(ConnectionState.DISCONNECTED)
            logger.error(f"MongoDB connection failed: {e}")
            return False
        self._set_state(ConnectionState.CONNECTED)
        logger.info("MongoDB connected successfully")
        return True

    def close(self) -> None:
        self.client.close()


def get_database(request: Request) -> Database:
    return request.app.state.database
