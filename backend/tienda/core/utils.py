from typing import Iterable, List, Optional


def unique_urls(urls: Iterable[Optional[str]]) -> List[str]:
    """
    Devuelve las URLs no vacías sin repetir, conservando el orden de aparición.
    """
    seen = set()
    result = []
    for url in urls:
        if not url or url in seen:
            continue
        seen.add(url)
        result.append(url)
    return result


def list_images(image_url: Optional[str], gallery_urls: Iterable[Optional[str]]) -> List[str]:
    """
    Imágenes de un producto en los listados.

    Si el producto tiene galería se devuelve tal cual (en orden de inserción),
    si no, la imagen principal, y si tampoco existe, una lista vacía.
    """
    gallery = unique_urls(gallery_urls)
    if gallery:
        return gallery
    return [image_url] if image_url else []


def detail_images(image_url: Optional[str], gallery_urls: Iterable[Optional[str]]) -> List[str]:
    """
    Imágenes de un producto en la vista de detalle: la principal primero.
    """
    return unique_urls([image_url, *gallery_urls])


def plan_gallery(
    image_url: Optional[str],
    images: Optional[Iterable[Optional[str]]],
    main_first: bool = True,
    deduplicate: bool = True,
) -> List[str]:
    """
    Calcula las filas de galería a insertar para un producto.

    La creación pone la imagen principal delante de `images`; la actualización
    la añade al final. Con `deduplicate=False` se reproduce el comportamiento
    histórico, en el que la imagen principal queda repetida si también viene
    en `images`.
    """
    extra = [url for url in (images or []) if url]
    main = [image_url] if image_url else []
    urls = main + extra if main_first else extra + main
    if deduplicate:
        return unique_urls(urls)
    return urls
