"""
Acceso a datos de productos y de su galería de imágenes.

Cada operación de escritura se confirma con un único commit: si falla
cualquier inserción de la galería no queda un producto a medias.
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from tienda.core.utils import plan_gallery
from tienda.models.product import Product
from tienda.models.product_image import ProductImage
from tienda.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

SCALAR_FIELDS = (
    "name",
    "description",
    "price",
    "category",
    "is_featured",
    "is_new",
    "is_luxury",
    "image_url",
)


def _add_gallery(db: Session, product: Product, urls: List[str]) -> None:
    for i, image_url in enumerate(urls):
        db.add(ProductImage(
            product_id=product.id,
            image_url=image_url,
            name=product.name,
            order=i,
        ))


def get_products(db: Session) -> List[Product]:
    return (
        db.query(Product)
        .options(selectinload(Product.gallery))
        .order_by(Product.created_at.desc())
        .all()
    )


def get_featured_products(db: Session, limit: int = 5) -> List[Product]:
    return (
        db.query(Product)
        .options(selectinload(Product.gallery))
        .filter(Product.is_featured.is_(True))
        .order_by(Product.created_at.desc())
        .limit(limit)
        .all()
    )


def get_product(db: Session, product_id: str) -> Optional[Product]:
    return (
        db.query(Product)
        .options(selectinload(Product.gallery))
        .filter(Product.id == product_id)
        .first()
    )


def create_product(db: Session, product_in: ProductCreate, deduplicate: bool = True) -> Product:
    """
    Inserta el producto y su galería: primero la imagen principal y después
    cada URL no vacía de `images`.
    """
    db_product = Product(**product_in.dict(exclude={"images"}))
    try:
        db.add(db_product)
        # flush para obtener el id antes de insertar la galería
        db.flush()
        urls = plan_gallery(
            product_in.image_url, product_in.images, main_first=True, deduplicate=deduplicate,
        )
        _add_gallery(db, db_product, urls)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(db_product)
    logger.info(f"Producto {db_product.id} creado con {len(urls)} imágenes en galería")
    return db_product


def update_product(
    db: Session, db_product: Product, product_in: ProductUpdate, deduplicate: bool = True,
) -> Product:
    """
    Sobrescribe todos los campos del producto y reemplaza la galería completa
    con `images` seguido de la imagen principal.
    """
    update_data = product_in.dict(exclude={"images"})
    try:
        for key in SCALAR_FIELDS:
            setattr(db_product, key, update_data.get(key))

        db.query(ProductImage).filter(
            ProductImage.product_id == db_product.id
        ).delete(synchronize_session=False)
        db.flush()

        urls = plan_gallery(
            product_in.image_url, product_in.images, main_first=False, deduplicate=deduplicate,
        )
        _add_gallery(db, db_product, urls)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    # La colección cargada antes del borrado masivo está obsoleta
    db.expire(db_product, ["gallery"])
    db.refresh(db_product)
    logger.info(f"Producto {db_product.id} actualizado con {len(urls)} imágenes en galería")
    return db_product


def delete_product(db: Session, product_id: str) -> bool:
    """
    Elimina el producto. Devuelve False si no existía.
    """
    db_product = db.query(Product).filter(Product.id == product_id).first()
    if db_product is None:
        return False

    try:
        db.delete(db_product)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(f"Producto {product_id} eliminado")
    return True
