from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    APP_NAME: str = "FamilyTreeAPI"
    APP_ENV: str = "dev"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "info"

    APP_CORS_ORIGINS: str = "http://localhost:3000"
    @property
    def CORS_ORIGINS(self) -> List[str]:
        return [o.strip() for o in self.APP_CORS_ORIGINS.split(",") if o.strip()]

    # Mongo
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB: str = "family_tree"
    # Multi-document transactions need a replica set; standalone servers fall back to compensation
    MONGODB_TRANSACTIONS: bool = False

settings = Settings()
