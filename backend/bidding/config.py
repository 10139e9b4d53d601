# backend/bidding/config.py
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./bidding.db"  # Default if not in .env

    # Auth
    JWT_SECRET: str = "your_jwt_secret"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    AUTH_VERIFY_USER_EXISTS: bool = True  # Re-check the token's user against the store

    # Email transport
    EMAIL_ENABLED: bool = True
    EMAIL_USER: str | None = None
    EMAIL_PASS: str | None = None
    EMAIL_FROM_NAME: str = "Bidding System"
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587

    # Server
    FRONTEND_URL: str = "http://localhost:3000"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    PUBLIC_BASE_URL: str = "http://localhost:5000"

    # Storage Paths
    STORAGE_PATH: Path = Path("storage")
    UPLOADS_PATH: Path | None = None  # Will be set based on STORAGE_PATH
    DELIVERABLES_PATH: Path | None = None  # Will be set based on STORAGE_PATH

    # Uploads
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024
    ALLOWED_UPLOAD_TYPES: list[str] = ["application/pdf"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def model_post_init(self, __context) -> None:
        """Post initialization hook to set derived paths"""
        if isinstance(self.STORAGE_PATH, str):
            self.STORAGE_PATH = Path(self.STORAGE_PATH)

        self.UPLOADS_PATH = Path(self.UPLOADS_PATH) if self.UPLOADS_PATH else self.STORAGE_PATH / "uploads"
        self.DELIVERABLES_PATH = Path(self.DELIVERABLES_PATH) if self.DELIVERABLES_PATH else self.STORAGE_PATH / "deliverables"

        self.create_storage_dirs()

    @property
    def email_configured(self) -> bool:
        return self.EMAIL_ENABLED and bool(self.EMAIL_USER) and bool(self.EMAIL_PASS)

    def create_storage_dirs(self) -> None:
        """Create necessary storage directories if they don't exist"""
        for path in [self.STORAGE_PATH, self.UPLOADS_PATH, self.DELIVERABLES_PATH]:
            path.mkdir(parents=True, exist_ok=True)

settings = Settings()
