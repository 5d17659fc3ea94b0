import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    database_url: str = os.getenv(
        "DATABASE_URL",
        "sqlite+aiosqlite:///./toolbox.db"
    )
    database_echo: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"

    # Storage key of the snapshot row; matches the browser app's localStorage key
    snapshot_key: str = os.getenv("SNAPSHOT_KEY", "toolbox-categorizer:v3")

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    cors_origins: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


settings = Settings()
