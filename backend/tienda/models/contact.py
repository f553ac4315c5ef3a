from sqlalchemy import Column, String, DateTime, Text, Index
from sqlalchemy.sql import func
from tienda.db.base_class import Base
import uuid

class Contact(Base):
    __tablename__ = "contacts"
    
    id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    email = Column(String, index=True, nullable=False)
    phone = Column(String, nullable=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    __table_args__ = (
        Index('idx_contact_created_at', 'created_at'),
    )
