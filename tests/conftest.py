import copy

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from main import app
from patient_manager.db import PatientRepository, to_object_id
from patient_manager.deps import get_repository

PATIENT = {
    "name": "Jane Doe",
    "age": 42,
    "email": "jane@example.com",
    "phone_number": "555-0100",
    "house_address": "12 Harbour Road",
}


class InMemoryPatientRepository(PatientRepository):
    """PatientRepository backed by a dict instead of a MongoDB collection.

    Documents are copied in and out so handlers cannot mutate stored state
    without going through the repository, as with a real store.
    """

    def __init__(self):
        super().__init__(collection=None)
        self.documents = {}

    async def find_all(self, query=None):
        return [copy.deepcopy(doc) for doc in self.documents.values()]

    async def find_by_id(self, patient_id):
        doc = self.documents.get(to_object_id(patient_id))
        return copy.deepcopy(doc) if doc else None

    async def insert(self, document):
        document["_id"] = ObjectId()
        self.documents[document["_id"]] = copy.deepcopy(document)
        return document

    async def delete_by_id(self, patient_id):
        return self.documents.pop(to_object_id(patient_id), None)

    async def update_by_id(self, patient_id, fields):
        doc = self.documents.get(to_object_id(patient_id))
        if doc is None:
            return None
        doc.update(copy.deepcopy(fields))
        return copy.deepcopy(doc)

    async def save(self, document):
        if document["_id"] not in self.documents:
            return None
        self.documents[document["_id"]] = copy.deepcopy(document)
        return document


@pytest.fixture
def repository():
    return InMemoryPatientRepository()


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def create_patient(client):
    def _create(**overrides):
        res = client.post("/patients", json={**PATIENT, **overrides})
        assert res.status_code == 201
        return res.json()
    return _create


@pytest.fixture
def payload():
    return dict(PATIENT)
