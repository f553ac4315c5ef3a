from tienda.crud import contact, product  # noqa: F401
