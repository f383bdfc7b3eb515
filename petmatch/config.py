from pydantic import BaseModel
import os
from dotenv import load_dotenv
load_dotenv()  # carga el archivo .env de la raíz


class ConfigurationError(RuntimeError):
    """Falta configuración obligatoria para arrancar el proceso."""


class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "PetMatch")
    env: str = os.getenv("APP_ENV", "dev")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    mongodb_uri: str = os.getenv("MONGODB_URI", "")
    mongodb_service_user: str = os.getenv("MONGODB_SERVICE_USER", "petmatch-service")
    mongodb_service_key: str = os.getenv("MONGODB_SERVICE_KEY", "")
    db_name: str = os.getenv("DB_NAME", "petmatch")

    def require_datastore(self) -> None:
        """Aborta el arranque si faltan el endpoint o la credencial del datastore."""
        missing = []
        if not self.mongodb_uri:
            missing.append("MONGODB_URI")
        if not self.mongodb_service_key:
            missing.append("MONGODB_SERVICE_KEY")
        if missing:
            raise ConfigurationError(
                "Missing " + ", ".join(missing) + " in environment variables."
            )


_settings: Settings | None = None
def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
