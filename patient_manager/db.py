from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from patient_manager.config import settings
from patient_manager.errors import StoreError


@contextmanager
def store_errors():
    """Re-raise driver failures as StoreError, keeping the driver's message."""
    try:
        yield
    except (InvalidId, PyMongoError) as e:
        raise StoreError(str(e)) from e


def to_object_id(patient_id: str) -> ObjectId:
    with store_errors():
        return ObjectId(patient_id)


class Database:
    def __init__(self, uri: str = None, name: str = None):
        self.uri = uri or settings.MONGODB_URI
        self.name = name or settings.MONGODB_NAME
        self.client = None
        self.db = None

    async def connect(self):
        if not self.client:
            # A malformed URI fails here, before any network traffic
            with store_errors():
                self.client = AsyncIOMotorClient(self.uri)
            self.db = self.client.get_database(self.name)
        return self.db

    async def ping(self):
        with store_errors():
            await self.db.command("ping")

    @property
    def patients(self):
        return self.db[settings.MONGODB_COLLECTION]

    async def close(self):
        if self.client:
            self.client.close()
            self.client = None
            self.db = None


class PatientRepository:
    """Persistence calls for patient documents.

    Every method returns raw documents (with ``_id`` as an ObjectId) and raises
    StoreError for malformed ids or driver failures.
    """

    def __init__(self, collection):
        self.collection = collection

    async def find_all(self, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        with store_errors():
            return await self.collection.find(query or {}).to_list(length=None)

    async def find_by_id(self, patient_id: str) -> Optional[Dict[str, Any]]:
        with store_errors():
            return await self.collection.find_one({"_id": to_object_id(patient_id)})

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        with store_errors():
            result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return document

    async def delete_by_id(self, patient_id: str) -> Optional[Dict[str, Any]]:
        with store_errors():
            return await self.collection.find_one_and_delete({"_id": to_object_id(patient_id)})

    async def update_by_id(self, patient_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with store_errors():
            return await self.collection.find_one_and_update(
                {"_id": to_object_id(patient_id)},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )

    async def save(self, document: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        # Only the embedded tests and the derived condition change on this path.
        with store_errors():
            result = await self.collection.update_one(
                {"_id": document["_id"]},
                {"$set": {"tests": document["tests"], "condition": document["condition"]}},
            )
        if result.matched_count == 0:
            return None
        return document
