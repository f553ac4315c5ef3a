from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tienda.db.base_class import Base
import uuid

class ProductImage(Base):
    __tablename__ = "product_images"
    
    id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    image_url = Column(String, nullable=False)
    # Copia del nombre del producto en el momento de la inserción
    name = Column(String, nullable=True)
    order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    # Relaciones
    product = relationship("Product", back_populates="gallery")
    
    # Índices
    __table_args__ = (
        Index('idx_product_image_product_id_order', 'product_id', 'order'),
    )
