from pydantic import BaseModel, validator, Field
from typing import Optional, List
from datetime import datetime

class ProductBase(BaseModel):
    name: str
    description: Optional[str] = None
    price: float = Field(..., gt=0)
    category: Optional[str] = None
    is_featured: bool = False
    is_new: bool = False
    is_luxury: bool = False
    image_url: Optional[str] = None

class ProductCreate(ProductBase):
    images: Optional[List[Optional[str]]] = []
    
    @validator('name')
    def name_must_not_be_blank(cls, v):
        if not v or not v.strip():
            raise ValueError('El nombre del producto es obligatorio')
        return v.strip()
    
    @validator('price')
    def price_must_be_positive(cls, v):
        if v <= 0:
            raise ValueError('El precio debe ser mayor que cero')
        return v
    
    @validator('images', pre=True)
    def images_default_to_empty(cls, v):
        return v or []

class ProductUpdate(ProductCreate):
    """PUT reemplaza todos los campos del producto, igual que en la creación."""
    pass

class ProductResponse(ProductBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    images: List[str] = []
    
    class Config:
        from_attributes = True

class ProductDeleteResponse(BaseModel):
    success: bool = True
