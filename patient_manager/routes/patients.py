from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
import logging

from patient_manager.db import PatientRepository
from patient_manager.deps import get_repository
from patient_manager.errors import StoreError, internal_error
from patient_manager.models.patient import Patient
from patient_manager.utils.serializers import serialize_patient
from patient_manager.utils.validators import (
    CREATE_PATIENT_FIELDS,
    UPDATE_PATIENT_FIELDS,
    as_body,
    decode_json_body,
    require_fields,
)

router = APIRouter(
    prefix="",
    tags=["patients"],
    responses={404: {"description": "Not found"}}
)

logger = logging.getLogger(__name__)

PATIENT_NOT_FOUND = "Patient not found"


@router.get("")
async def get_patients(request: Request, repository: PatientRepository = Depends(get_repository)):
    # Query params are logged but do not filter the result
    logger.info(f"GET /patients params=>{dict(request.query_params)}")
    try:
        patients = await repository.find_all()
    except StoreError as e:
        logger.error(f"Error retrieving patients: {str(e)}")
        raise internal_error(e)
    return jsonable_encoder([serialize_patient(p) for p in patients])


@router.get("/{id}")
async def get_patient(id: str, repository: PatientRepository = Depends(get_repository)):
    try:
        patient = await repository.find_by_id(id)
    except StoreError as e:
        logger.error(f"Error retrieving patient {id}: {str(e)}")
        raise internal_error(e)
    if not patient:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return jsonable_encoder(serialize_patient(patient))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_patient(body: Any = Body(default=None), repository: PatientRepository = Depends(get_repository)):
    body = as_body(body)
    require_fields(body, CREATE_PATIENT_FIELDS)

    new_patient = Patient(
        name=body["name"],
        age=body["age"],
        email=body["email"],
        phone_number=body["phone_number"],
        house_address=body["house_address"],
    )
    try:
        created_patient = await repository.insert(new_patient.to_document())
    except StoreError as e:
        logger.error(f"Error creating patient: {str(e)}")
        raise internal_error(e)
    logger.info(f"Created patient {created_patient['_id']}")
    return jsonable_encoder(serialize_patient(created_patient))


@router.delete("/{id}")
async def delete_patient(id: str, repository: PatientRepository = Depends(get_repository)):
    try:
        deleted_patient = await repository.delete_by_id(id)
    except StoreError as e:
        logger.error(f"Error deleting patient {id}: {str(e)}")
        raise internal_error(e)
    if not deleted_patient:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=PATIENT_NOT_FOUND)
    logger.info(f"Deleted patient {id}")
    return jsonable_encoder(serialize_patient(deleted_patient))


@router.put("/{id}")
async def update_patient(id: str, request: Request, repository: PatientRepository = Depends(get_repository)):
    # Accepts both a JSON object and the legacy JSON-encoded string of one
    body = decode_json_body(await request.body())
    require_fields(body, UPDATE_PATIENT_FIELDS)

    fields = {key: body[key] for key, _ in UPDATE_PATIENT_FIELDS}
    # condition is stored as sent; an absent condition is left untouched
    if "condition" in body:
        fields["condition"] = body["condition"]

    try:
        updated_patient = await repository.update_by_id(id, fields)
    except StoreError as e:
        logger.error(f"Error updating patient {id}: {str(e)}")
        raise internal_error(e)
    if not updated_patient:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=PATIENT_NOT_FOUND)
    return {
        "data": jsonable_encoder(serialize_patient(updated_patient)),
        "message": "Patient info updated"
    }
