from __future__ import annotations

import logging
from typing import List, Optional

from ...domain.errors import ValidationError
from ...domain.models import Product, UploadedImage
from ...domain.ports.persistence import ImageStorage, ProductRepository
from ..validation import validate_product

logger = logging.getLogger(__name__)


class ProductService:
    """CRUD over catalogue products and their images."""

    def __init__(self, products: ProductRepository, images: ImageStorage) -> None:
        self._products = products
        self._images = images

    def create(
        self,
        name: Optional[str],
        description: Optional[str],
        price: Optional[float],
        image: Optional[UploadedImage] = None,
    ) -> Product:
        data = validate_product(name, description, price)
        image_name = self._store_image(image)
        try:
            product = self._products.insert_product(data.name, data.description, data.price, image_name)
        except Exception:
            self._discard_image(image_name)
            raise
        logger.info("Created product %s", product.id)
        return product

    def get(self, product_id: int) -> Product:
        return self._products.find_product(product_id)

    def list_all(self) -> List[Product]:
        return self._products.list_products()

    def update(
        self,
        product_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price: Optional[float] = None,
        image: Optional[UploadedImage] = None,
    ) -> Product:
        data = validate_product(name, description, price, partial=True)
        existing = self._products.find_product(product_id)
        image_name = self._store_image(image)
        try:
            product = self._products.update_product(
                product_id,
                name=data.name,
                description=data.description,
                price=data.price,
                image=image_name,
            )
        except Exception:
            self._discard_image(image_name)
            raise
        if image_name and existing.image:
            self._images.delete(existing.image)
        return product

    def delete(self, product_id: int) -> None:
        product = self._products.find_product(product_id)
        self._products.delete_product(product_id)
        if product.image:
            self._images.delete(product.image)
        logger.info("Deleted product %s", product_id)

    def _store_image(self, image: Optional[UploadedImage]) -> Optional[str]:
        if image is None:
            return None
        if not image.content_type.startswith("image/"):
            raise ValidationError("Only image uploads are allowed")
        if not image.data:
            raise ValidationError("Uploaded image is empty")
        return self._images.save(image.filename, image.data)

    def _discard_image(self, image_name: Optional[str]) -> None:
        if image_name:
            self._images.delete(image_name)
