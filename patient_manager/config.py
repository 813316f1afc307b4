from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_NAME: str = "patient_manager"
    MONGODB_COLLECTION: str = "patients"
    HOST: str = "0.0.0.0"
    PORT: int = 4200
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
