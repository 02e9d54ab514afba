import os
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Settings:
    # -------------------------------------------------------
    # Project
    # -------------------------------------------------------
    PROJECT_NAME: str = "PetBook API"
    ENV: str = os.getenv("ENV", "dev")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # -------------------------------------------------------
    # Database
    # -------------------------------------------------------
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./petbook.db"
    )

    # Supabase hands out postgres:// but SQLAlchemy needs postgresql://
    if DATABASE_URL.startswith("postgres://"):
        DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

    # -------------------------------------------------------
    # Authentication (tokens issued by Supabase Auth)
    # -------------------------------------------------------
    SUPABASE_JWT_SECRET: str = os.getenv(
        "SUPABASE_JWT_SECRET",
        "supersecretlocalkey123"   # Only used for local dev
    )
    SUPABASE_JWT_AUDIENCE: str = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")
    ALGORITHM: str = "HS256"

    # -------------------------------------------------------
    # Public base URL (used to build absolute media URLs)
    # -------------------------------------------------------
    BASE_URL: str = os.getenv(
        "BASE_URL",
        "http://127.0.0.1:8000"
    )

    # -------------------------------------------------------
    # CORS
    # -------------------------------------------------------
    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    # -------------------------------------------------------
    # Feed / stories / notifications
    # -------------------------------------------------------
    FEED_PAGE_SIZE: int = int(os.getenv("FEED_PAGE_SIZE", 50))

    STORY_TTL_HOURS: int = int(os.getenv("STORY_TTL_HOURS", 24))

    # How many distinct pets a professional sees in the stories bar
    STORY_PROFESSIONAL_LIMIT: int = int(os.getenv("STORY_PROFESSIONAL_LIMIT", 50))

    # Advertised to clients that poll the stories bar
    STORY_POLL_SECONDS: int = int(os.getenv("STORY_POLL_SECONDS", 60))

    COMMENT_PREVIEW_LENGTH: int = int(os.getenv("COMMENT_PREVIEW_LENGTH", 50))
    NOTIFICATION_PAGE_SIZE: int = int(os.getenv("NOTIFICATION_PAGE_SIZE", 50))


# Single instance that is imported everywhere
settings = Settings()
