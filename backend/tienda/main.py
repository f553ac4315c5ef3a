from fastapi import FastAPI
from fastapi.openapi.docs import get_swagger_ui_html
from starlette.concurrency import run_in_threadpool
import logging
from contextlib import asynccontextmanager

from tienda.api.api import api_router
from tienda.api.error_handlers import register_error_handlers
from tienda.core.config import settings
from tienda.middleware.security import setup_security_middleware

# Configurar logging
logging.basicConfig(
    level=logging.INFO if not settings.DEBUG else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from tienda.db.session import init_db_connection, close_db_connection

    logger.info(f"Iniciando la aplicación en entorno: {settings.ENVIRONMENT}")
    logger.info("Inicializando conexión a la base de datos...")
    connected = await run_in_threadpool(
        init_db_connection,
        max_retries=settings.DB_CONNECT_MAX_RETRIES,
        initial_delay=2,
    )

    if not connected:
        logger.error("No se pudo inicializar la conexión a la base de datos antes del lifespan")

    yield

    logger.info("Deteniendo la aplicación...")
    close_db_connection()
    logger.info("Conexiones a base de datos cerradas")


# Crear la aplicación FastAPI
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API de la tienda: productos con galería de imágenes y formulario de contacto",
    version="0.1.0",
    openapi_url="/openapi.json" if not settings.ENVIRONMENT == "production" else None,
    docs_url=None,  # Desactivamos endpoint de docs por defecto
    redoc_url=None,  # Desactivamos endpoint de redoc por defecto
    lifespan=lifespan,
)

register_error_handlers(app)

# Configurar middlewares de seguridad
setup_security_middleware(app)

# Incluir routers
app.include_router(api_router, prefix=settings.API_STR)


if settings.ENVIRONMENT != "production":
    @app.get("/docs", include_in_schema=False)
    async def custom_swagger_ui_html():
        """
        Endpoint personalizado para la documentación Swagger usando CDN.
        """
        return get_swagger_ui_html(
            openapi_url="/openapi.json",
            title=f"{settings.PROJECT_NAME} - API Documentation",
            swagger_js_url="https://cdn.jsdelivr.net/npm/swagger-ui-dist@5.12.0/swagger-ui-bundle.js",
            swagger_css_url="https://cdn.jsdelivr.net/npm/swagger-ui-dist@5.12.0/swagger-ui.css",
            swagger_ui_parameters={"persistAuthorization": True},
        )
