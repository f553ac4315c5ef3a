from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Any, List

from tienda.api import deps
from tienda.core.config import settings
from tienda.core.utils import detail_images, list_images
from tienda import crud
from tienda.models.product import Product
from tienda.schemas.product import (
    ProductCreate,
    ProductDeleteResponse,
    ProductResponse,
    ProductUpdate,
)

router = APIRouter()


def _to_response(product: Product, detail: bool = False) -> ProductResponse:
    gallery_urls = [image.image_url for image in product.gallery]
    images = (
        detail_images(product.image_url, gallery_urls)
        if detail
        else list_images(product.image_url, gallery_urls)
    )
    return ProductResponse(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price,
        category=product.category,
        is_featured=product.is_featured,
        is_new=product.is_new,
        is_luxury=product.is_luxury,
        image_url=product.image_url,
        created_at=product.created_at,
        updated_at=product.updated_at,
        images=images,
    )


@router.get("", response_model=List[ProductResponse])
def get_products(
    *,
    db: Session = Depends(deps.get_db),
) -> Any:
    """
    Obtener todos los productos, los más recientes primero.
    """
    products = crud.product.get_products(db)
    return [_to_response(product) for product in products]


@router.get("/featured", response_model=List[ProductResponse])
def get_featured_products(
    *,
    db: Session = Depends(deps.get_db),
) -> Any:
    """
    Obtener los productos destacados más recientes.
    """
    products = crud.product.get_featured_products(db, limit=settings.FEATURED_PRODUCTS_LIMIT)
    return [_to_response(product) for product in products]


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    *,
    db: Session = Depends(deps.get_db),
    product_id: str,
) -> Any:
    """
    Obtener un producto por su ID, con la imagen principal primero.
    """
    product = crud.product.get_product(db, product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Producto no encontrado",
        )

    return _to_response(product, detail=True)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.require_admin)],
)
def create_product(
    *,
    db: Session = Depends(deps.get_db),
    product_in: ProductCreate,
) -> Any:
    """
    Crear un nuevo producto con su galería de imágenes.
    """
    product = crud.product.create_product(
        db, product_in, deduplicate=settings.GALLERY_DEDUPLICATE,
    )
    return _to_response(product, detail=True)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    dependencies=[Depends(deps.require_admin)],
)
def update_product(
    *,
    db: Session = Depends(deps.get_db),
    product_id: str,
    product_in: ProductUpdate,
) -> Any:
    """
    Reemplazar un producto y toda su galería.
    """
    product = crud.product.get_product(db, product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Producto no encontrado",
        )

    product = crud.product.update_product(
        db, product, product_in, deduplicate=settings.GALLERY_DEDUPLICATE,
    )
    return _to_response(product, detail=True)


@router.delete(
    "/{product_id}",
    response_model=ProductDeleteResponse,
    dependencies=[Depends(deps.require_admin)],
)
def delete_product(
    *,
    db: Session = Depends(deps.get_db),
    product_id: str,
) -> Any:
    """
    Eliminar un producto. Sus imágenes se borran en cascada.
    """
    if not crud.product.delete_product(db, product_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Producto no encontrado",
        )

    return {"success": True}
