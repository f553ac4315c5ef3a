from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class ContactCreate(BaseModel):
    # Los obligatorios se validan en el endpoint para responder 400 con un mensaje único
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None

class ContactAdminResponse(BaseModel):
    id: str
    name: str
    email: str
    message: str
    created_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class ContactResponse(ContactAdminResponse):
    phone: Optional[str] = None

class ContactSubmitResponse(BaseModel):
    message: str
    contact: ContactResponse
