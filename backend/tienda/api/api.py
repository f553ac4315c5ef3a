#backend/tienda/api/api.py
from fastapi import APIRouter
from tienda.api.v1.endpoints import contacts, health, products

api_router = APIRouter()

# Incluir routers para diferentes recursos
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(contacts.router, tags=["contacts"])
api_router.include_router(health.router, tags=["health"])
