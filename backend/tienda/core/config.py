import logging
from typing import Any, Dict, List, Optional, Union
from pydantic import AnyHttpUrl, validator
from pydantic_settings import BaseSettings

# Configurar logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

class EnvironmentSettings(BaseSettings):
    """Configuración básica de entorno"""
    # Entorno de ejecución
    ENVIRONMENT: str = "development"

    @validator("ENVIRONMENT")
    def validate_environment(cls, v):
        allowed = ["development", "testing", "staging", "production"]
        if v.lower() not in allowed:
            raise ValueError(f"Entorno debe ser uno de: {', '.join(allowed)}")
        return v.lower()

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

# Cargar el entorno primero
env = EnvironmentSettings().ENVIRONMENT

# Mapeo de archivos de entorno
env_files = {
    "development": [".env.development", ".env"],
    "testing": [".env.testing", ".env"],
    "staging": [".env.staging", ".env"],
    "production": [".env.production", ".env"],
}

class Settings(BaseSettings):
    # API
    API_STR: str = "/api"
    PROJECT_NAME: str = "Tienda"
    DEBUG: bool = False

    # Entorno
    ENVIRONMENT: str = env

    # Administración: secreto compartido enviado en la cabecera x-admin-auth
    ADMIN_PASSWORD: Optional[str] = None

    @validator("ADMIN_PASSWORD", pre=True)
    def validate_admin_password(cls, v):
        if env == "production" and (not v or len(v) < 12):
            raise ValueError("ADMIN_PASSWORD debe tener al menos 12 caracteres en producción")
        if not v:
            logger.warning("ADMIN_PASSWORD no configurada, las rutas de administración rechazarán todas las peticiones")
            return None
        return v

    # CORS
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Base de datos
    POSTGRES_SERVER: str = "db"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "tienda"
    DATABASE_URL: Optional[str] = None
    DB_CONNECT_MAX_RETRIES: int = 5

    # Validación de contraseña de base de datos
    @validator("POSTGRES_PASSWORD", pre=True)
    def validate_db_password(cls, v):
        if env == "production" and (not v or len(v) < 12):
            raise ValueError("POSTGRES_PASSWORD debe tener al menos 12 caracteres en producción")
        return v

    @validator("DATABASE_URL", pre=True, always=True)
    def assemble_db_connection(cls, v: Optional[str], values: Dict[str, Any]) -> Any:
        if isinstance(v, str) and v:
            return v

        password = values.get("POSTGRES_PASSWORD")
        if not password:
            if env == "production":
                raise ValueError("Error en configuración de base de datos: falta POSTGRES_PASSWORD")
            # En desarrollo, usar SQLite como fallback
            logger.warning("PostgreSQL sin contraseña configurada, usando SQLite")
            return "sqlite:///./tienda.db"

        # Construir DSN
        return (
            f"postgresql://{values.get('POSTGRES_USER')}:{password}"
            f"@{values.get('POSTGRES_SERVER')}/{values.get('POSTGRES_DB') or ''}"
        )

    # Catálogo
    FEATURED_PRODUCTS_LIMIT: int = 5
    # Si es False se conserva el comportamiento histórico: la imagen principal
    # se vuelve a insertar en la galería aunque ya esté en `images`
    GALLERY_DEDUPLICATE: bool = True

    # Listado de contactos sin autenticación (solo para desarrollo)
    ENABLE_DEV_ENDPOINTS: bool = False

    # Configuraciones específicas por entorno
    def get_settings_by_environment(self) -> Dict[str, Any]:
        settings_map = {
            "development": {
                "DEBUG": True,
            },
            "testing": {
                "DEBUG": True,
                "DB_CONNECT_MAX_RETRIES": 1,
            },
            "staging": {
                "DEBUG": False,
            },
            "production": {
                "DEBUG": False,
                "ENABLE_DEV_ENDPOINTS": False,
            },
        }

        return settings_map.get(self.ENVIRONMENT, {})

    # Aplicar configuraciones específicas del entorno
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        env_settings = self.get_settings_by_environment()
        for key, value in env_settings.items():
            if hasattr(self, key):
                setattr(self, key, value)

    class Config:
        case_sensitive = True
        env_file = env_files.get(env, [".env"])
        extra = "ignore"

# Crear instancia de configuración
settings = Settings()

# Registrar información de inicio
logger.info(f"Iniciando aplicación en entorno: {settings.ENVIRONMENT}")
logger.info(f"Depuración: {'activada' if settings.DEBUG else 'desactivada'}")
db_url_safe = str(settings.DATABASE_URL)
if settings.POSTGRES_PASSWORD:
    db_url_safe = db_url_safe.replace(settings.POSTGRES_PASSWORD, "****")
logger.info(f"Base de datos: {db_url_safe}")
