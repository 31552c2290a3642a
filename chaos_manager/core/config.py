from pydantic_settings import BaseSettings
from typing import List, Literal
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str = "sqlite:///./database/chaos_manager.db"
    DATABASE_ECHO: bool = False

    # JWT settings
    SECRET_KEY: str = "your-super-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Project settings
    PROJECT_NAME: str = "Chaos Manager"
    API_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:3001"]

    # Directory of the built single-page frontend (served for non-API GETs)
    FRONTEND_BUILD_DIR: str = "frontend/build"

    # What GET /todos returns to callers without an identity:
    # "unowned" -> tasks that have no owner, "none" -> nothing
    ANONYMOUS_TASK_SCOPE: Literal["unowned", "none"] = "unowned"

    # Logging
    LOG_FORMAT: Literal["dev", "json"] = "dev"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 3000

    class Config:
        env_file = ".env"
        # Variables in .env that aren't defined here are ignored.
        extra = "ignore"

settings = Settings()
