from pydantic_settings import BaseSettings
from dotenv import load_dotenv
import os

load_dotenv()

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./estatehub.db")

    # JWT
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me-in-production")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120"))

    # App
    APP_NAME: str = os.getenv("APP_NAME", "EstateHub Marketplace API")
    DEBUG: bool = os.getenv("DEBUG", "True") == "True"
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Main admin: a singleton identity that can always log in
    MAIN_ADMIN_EMAIL: str = os.getenv("MAIN_ADMIN_EMAIL", "admin1@ds.gmail.com")
    MAIN_ADMIN_PASSWORD: str = os.getenv("MAIN_ADMIN_PASSWORD", "admin1ds")
    MAIN_ADMIN_NAME: str = os.getenv("MAIN_ADMIN_NAME", "Main Admin")
    # Only admins may register with this domain, and admins must use it
    ADMIN_EMAIL_DOMAIN: str = os.getenv("ADMIN_EMAIL_DOMAIN", "@ds.gmail.com")

    # Email verification
    VERIFICATION_CODE_EXPIRY_MINUTES: int = int(os.getenv("VERIFICATION_CODE_EXPIRY_MINUTES", "15"))

    # Media
    MEDIA_ROOT: str = os.getenv("MEDIA_ROOT", "media")
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
