from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Any
import logging

from tienda.api import deps
from tienda.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(
    *,
    db: Session = Depends(deps.get_db),
) -> Any:
    """
    Comprobar que la API responde y que la base de datos es accesible.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check fallido: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Base de datos no disponible",
        )

    return {"status": "ok", "environment": settings.ENVIRONMENT}
