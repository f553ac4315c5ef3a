from sqlalchemy import Column, String, Boolean, DateTime, Float, Text, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tienda.db.base_class import Base
import uuid

class Product(Base):
    __tablename__ = "products"
    
    id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    category = Column(String, nullable=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    is_new = Column(Boolean, default=False, nullable=False)
    is_luxury = Column(Boolean, default=False, nullable=False)
    image_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relaciones
    gallery = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProductImage.order",
    )
    
    # Índices adicionales para optimizar búsquedas
    __table_args__ = (
        Index('idx_product_created_at', 'created_at'),
        Index('idx_product_category', 'category'),
        Index('idx_product_featured_created_at', 'is_featured', 'created_at'),
    )
