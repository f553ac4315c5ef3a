#backend/tienda/api/deps.py
import secrets
from typing import Generator, Optional
from fastapi import Header, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from tienda.core.config import settings
import logging

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency para obtener una sesión de base de datos por petición.
    """
    # Importamos aquí para leer el estado actual del módulo
    from tienda.db import session as db_session

    if not db_session._is_initialized:
        logger.warning("Conexión a base de datos no inicializada en get_db, inicializando...")
        if not db_session.init_db_connection(max_retries=1):
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="No se pudo conectar a la base de datos",
            )

    db = db_session.SessionLocal()
    try:
        yield db
    except Exception as e:
        # Las HTTPException (401, 404...) también deshacen la transacción
        if isinstance(e, SQLAlchemyError):
            logger.error(f"Error en sesión de base de datos: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def require_admin(
    x_admin_auth: Optional[str] = Header(None, alias="x-admin-auth"),
) -> None:
    """
    Dependency que exige el secreto de administración en la cabecera x-admin-auth.
    """
    admin_password = settings.ADMIN_PASSWORD
    if (
        not x_admin_auth
        or not admin_password
        or not secrets.compare_digest(x_admin_auth.encode(), admin_password.encode())
    ):
        logger.warning("Intento de acceso de administración no autorizado")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


def require_dev_endpoints() -> None:
    """
    Dependency que solo deja pasar si las rutas de desarrollo están activadas.
    """
    if not settings.ENABLE_DEV_ENDPOINTS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not Found",
        )
