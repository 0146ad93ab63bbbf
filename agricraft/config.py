import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    # Streaming generative endpoint (SSE). The proxy identifies the app via X-App-Id.
    AI_API_URL: str = os.getenv(
        "AI_API_URL",
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:streamGenerateContent?alt=sse",
    )
    APP_ID: str = os.getenv("APP_ID", "")
    AI_CONNECT_TIMEOUT: float = float(os.getenv("AI_CONNECT_TIMEOUT", 10))

    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DB: str = os.getenv("MONGO_DB", "agricraft")

    AZURE_STORAGE_CONNECTION_STRING: str = os.getenv("AZURE_STORAGE_CONNECTION_STRING", "")
    AZURE_BLOB_CONTAINER: str = os.getenv("AZURE_BLOB_CONTAINER", "agricraft-images").strip().lower()
    AZURE_BLOB_PUBLIC_BASE: str = (os.getenv("AZURE_BLOB_PUBLIC_BASE") or "").rstrip("/")

    # Upload size budget
    MAX_UPLOAD_MB: float = float(os.getenv("MAX_UPLOAD_MB", 1))
    MAX_IMAGE_DIMENSION: int = int(os.getenv("MAX_IMAGE_DIMENSION", 1080))

    API_KEYS: str = os.getenv("API_KEYS", "")
    CORS_ALLOWED_ORIGINS: str = os.getenv("CORS_ALLOWED_ORIGINS", "*").strip()

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
