import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tienda.models.contact import Contact

logger = logging.getLogger(__name__)


def create_contact(
    db: Session, *, name: str, email: str, message: str, phone: Optional[str] = None,
) -> Contact:
    db_contact = Contact(name=name, email=email, phone=phone or None, message=message)
    try:
        db.add(db_contact)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(db_contact)
    logger.info(f"Mensaje de contacto {db_contact.id} recibido")
    return db_contact


def get_contacts(db: Session) -> List[Contact]:
    """Todos los mensajes de contacto, los más recientes primero."""
    return db.query(Contact).order_by(Contact.created_at.desc()).all()
