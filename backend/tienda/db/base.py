# Importar todos los modelos para que queden registrados en Base.metadata
from tienda.db.base_class import Base  # noqa: F401
from tienda.models.product import Product  # noqa: F401
from tienda.models.product_image import ProductImage  # noqa: F401
from tienda.models.contact import Contact  # noqa: F401
