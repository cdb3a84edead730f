"""In-memory stand-in for the motor client used by route and store tests.

Supports only what StudentStore calls: find().to_list, find_one, insert_one,
find_one_and_update ($set), find_one_and_delete and admin.command("ping").
Setting `client.down = True` makes every call raise ServerSelectionTimeoutError,
the way motor does when mongod cannot be reached.
"""

import copy

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import ServerSelectionTimeoutError


class _InsertOneResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class _Cursor:
    def __init__(self, collection, query):
        self._collection = collection
        self._query = query

    async def to_list(self, length=None):
        self._collection.check()
        docs = [copy.deepcopy(d) for d in self._collection.docs if _matches(d, self._query)]
        return docs if length is None else docs[:length]


def _matches(doc, query):
    return all(doc.get(key) == value for key, value in (query or {}).items())


class FakeCollection:
    def __init__(self, client):
        self._client = client
        self.docs = []

    def check(self):
        if self._client.down:
            raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")

    def find(self, query=None):
        return _Cursor(self, query)

    async def find_one(self, query):
        self.check()
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, document):
        self.check()
        document.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(document))
        return _InsertOneResult(document["_id"])

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        self.check()
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                doc.update(copy.deepcopy(update.get("$set", {})))
                return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before
        return None

    async def find_one_and_delete(self, query):
        self.check()
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                return self.docs.pop(i)
        return None


class _FakeDatabase:
    def __init__(self, client):
        self._client = client
        self._collections = {}

    def __getitem__(self, name):
        if name not in self._collections:
            self._collections[name] = FakeCollection(self._client)
        return self._collections[name]


class _FakeAdmin:
    def __init__(self, client):
        self._client = client

    async def command(self, name):
        if self._client.down:
            raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")
        return {"ok": 1.0}


class FakeMongoClient:
    def __init__(self, down=False):
        self.down = down
        self.closed = False
        self.admin = _FakeAdmin(self)
        self._databases = {}

    def __getitem__(self, name):
        if name not in self._databases:
            self._databases[name] = _FakeDatabase(self)
        return self._databases[name]

    def close(self):
        self.closed = True
