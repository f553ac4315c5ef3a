from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Any, List

from tienda.api import deps
from tienda import crud
from tienda.schemas.contact import (
    ContactAdminResponse,
    ContactCreate,
    ContactResponse,
    ContactSubmitResponse,
)

router = APIRouter()


def _is_blank(value) -> bool:
    return value is None or not str(value).strip()


@router.post("/contact", response_model=ContactSubmitResponse, status_code=status.HTTP_201_CREATED)
def submit_contact(
    *,
    db: Session = Depends(deps.get_db),
    contact_in: ContactCreate,
) -> Any:
    """
    Guardar un mensaje del formulario de contacto.
    """
    if _is_blank(contact_in.name) or _is_blank(contact_in.email) or _is_blank(contact_in.message):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nombre, email y mensaje son obligatorios.",
        )

    contact = crud.contact.create_contact(
        db,
        name=contact_in.name.strip(),
        email=contact_in.email.strip(),
        phone=contact_in.phone.strip() if contact_in.phone else None,
        message=contact_in.message.strip(),
    )
    return {"message": "¡Mensaje recibido!", "contact": ContactResponse.model_validate(contact)}


@router.get(
    "/contacts",
    response_model=List[ContactAdminResponse],
    dependencies=[Depends(deps.require_admin)],
)
def get_contacts(
    *,
    db: Session = Depends(deps.get_db),
) -> Any:
    """
    Listar los mensajes de contacto (solo administración). No incluye el teléfono.
    """
    return crud.contact.get_contacts(db)


@router.get(
    "/contact",
    response_model=List[ContactResponse],
    dependencies=[Depends(deps.require_dev_endpoints)],
)
def get_contacts_dev(
    *,
    db: Session = Depends(deps.get_db),
) -> Any:
    """
    Listado completo sin autenticación. Solo disponible con ENABLE_DEV_ENDPOINTS.
    """
    return crud.contact.get_contacts(db)
