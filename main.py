from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from patient_manager.config import settings
from patient_manager.db import Database
from patient_manager.errors import StoreError

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="patient-manager",
    description="Patient records and diagnostic test results for the clinic",
    version="1.0.0",
    redirect_slashes=True
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Accept", "Content-Type", "Origin", "X-Requested-With"],
)

# One Database per process, shared by every request through get_repository
app.state.db = Database(settings.MONGODB_URI, settings.MONGODB_NAME)

from patient_manager.routes.patients import router as patients_router
from patient_manager.routes.patient_tests import router as patient_tests_router

app.include_router(patients_router, prefix="/patients")
app.include_router(patient_tests_router, prefix="/patients")

RESOURCES = [
    ("GET PATIENTS", "GET", "/patients"),
    ("GET SINGLE PATIENT", "GET", "/patients/:id"),
    ("DELETE A PATIENT", "DELETE", "/patients/:id"),
    ("ADD NEW PATIENT", "POST", "/patients"),
    ("UPDATE PATIENT", "PUT", "/patients/:id"),
    ("ADD TEST TO PATIENT", "POST", "/patients/:id/tests"),
    ("UPDATE PATIENT TEST", "PUT", "/patients/:id/tests/:test_id"),
]


@app.on_event("startup")
async def startup():
    try:
        await app.state.db.connect()
        await app.state.db.ping()
        logger.info(f"Connected to the database {settings.MONGODB_NAME}")
    except StoreError as e:
        # Keep serving; requests fail with 500 until the store is reachable
        logger.error(f"connection error: {str(e)}")


@app.on_event("shutdown")
async def shutdown():
    if app.state.db.client:
        await app.state.db.close()
        logger.info("Database connection closed.")


@app.on_event("startup")
async def print_routes():
    logger.info(f"Server {app.title} listening at http://{settings.HOST}:{settings.PORT}")
    logger.info("Endpoints:")
    for label, method, path in RESOURCES:
        logger.info(f"   {label} (method: {method}) => {settings.HOST}:{settings.PORT}{path}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
