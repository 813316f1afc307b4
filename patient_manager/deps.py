"""
API dependencies.

Handlers never touch the motor client directly: the Database built at startup
lives on ``app.state.db`` and is handed out through ``get_repository``.
"""

from fastapi import Request

from patient_manager.db import PatientRepository
from patient_manager.errors import StoreError, internal_error


async def get_repository(request: Request) -> PatientRepository:
    database = request.app.state.db
    if database.db is None:
        try:
            await database.connect()
        except StoreError as e:
            raise internal_error(e)
    return PatientRepository(database.patients)
