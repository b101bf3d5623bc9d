"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./bulky_waste.db"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8080,http://localhost:5173"
    MUNICIPALITIES_API_URL: str = "https://json.geoapi.pt/municipios"
    MUNICIPALITIES_TIMEOUT_MS: int = 20000
    MUNICIPALITIES_IMPORT_ENABLED: bool = True
    MAX_BOOKINGS_PER_MUNICIPALITY: int = 32
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def cors_origins(self) -> list[str]:
        """Whitelisted origins with blanks dropped."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
