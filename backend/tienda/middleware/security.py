from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.middleware.cors import CORSMiddleware
import time
import logging
from typing import Any, Callable, List, Optional
from tienda.core.config import settings

logger = logging.getLogger(__name__)

class SecurityMiddleware(BaseHTTPMiddleware):
    """
    Middleware de seguridad:
    - Añade encabezados de seguridad a todas las respuestas
    - Mide el tiempo de procesamiento de cada petición
    """

    def __init__(self, app: FastAPI, docs_paths: Optional[List[str]] = None):
        super().__init__(app)
        self.docs_paths = docs_paths or ["/docs", "/redoc", "/openapi.json"]

    def is_docs_path(self, path: str) -> bool:
        return any(path.startswith(docs_path) for docs_path in self.docs_paths)

    def add_security_headers(self, response: Response, path: str) -> None:
        """Añade encabezados de seguridad a la respuesta"""
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), camera=(), microphone=()"

        if self.is_docs_path(path):
            # La documentación carga Swagger UI desde un CDN
            response.headers["X-Frame-Options"] = "SAMEORIGIN"
        else:
            response.headers["X-Frame-Options"] = "DENY"
            response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"

        # Strict-Transport-Security (HSTS)
        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Any]
    ) -> Response:
        start_time = time.time()
        path = request.url.path

        response = await call_next(request)

        self.add_security_headers(response, path)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.debug(f"{request.method} {path} -> {response.status_code} ({process_time:.4f}s)")

        return response

def setup_security_middleware(app: FastAPI) -> None:
    """Configura los middlewares de seguridad para la aplicación"""
    # CORS
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Process-Time"],
        )

    # Middleware de seguridad personalizado
    app.add_middleware(SecurityMiddleware)
