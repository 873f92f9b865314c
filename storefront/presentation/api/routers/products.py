"""API router for catalogue products."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from ....application.services.product_service import ProductService
from ....core.dependencies import get_product_service
from ....domain.models import Product, UploadedImage

router = APIRouter(tags=["Products"])


@router.post("/create/product", status_code=status.HTTP_201_CREATED)
def create_product(
    name: str = Form(..., alias="productName"),
    price: float = Form(..., alias="productPrice"),
    description: str = Form(""),
    image: Optional[UploadFile] = File(None),
    products: ProductService = Depends(get_product_service),
) -> dict:
    product = products.create(name, description, price, _read_upload(image))
    return {"message": "Product created successfully", "data": _serialize_product(product)}


@router.get("/product/{product_id}")
def get_product(
    product_id: int,
    products: ProductService = Depends(get_product_service),
) -> dict:
    product = products.get(product_id)
    return {"message": "Product details retrieved successfully", "data": _serialize_product(product)}


@router.get("/products")
def get_products(products: ProductService = Depends(get_product_service)) -> dict:
    items = products.list_all()
    return {
        "message": f"All products in the database: {len(items)}",
        "data": [_serialize_product(product) for product in items],
    }


@router.put("/update/{product_id}")
def update_product(
    product_id: int,
    name: Optional[str] = Form(None, alias="productName"),
    price: Optional[float] = Form(None, alias="productPrice"),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    products: ProductService = Depends(get_product_service),
) -> dict:
    product = products.update(
        product_id,
        name=name,
        description=description,
        price=price,
        image=_read_upload(image),
    )
    return {"message": "Product updated successfully", "data": _serialize_product(product)}


@router.delete("/delete/{product_id}")
def delete_product(
    product_id: int,
    products: ProductService = Depends(get_product_service),
) -> dict:
    products.delete(product_id)
    return {"message": "Product deleted successfully"}


def _read_upload(upload: Optional[UploadFile]) -> Optional[UploadedImage]:
    if upload is None:
        return None
    return UploadedImage(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        data=upload.file.read(),
    )


def _serialize_product(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "image": product.image,
        "createdAt": product.created_at.replace(microsecond=0).isoformat(),
        "updatedAt": product.updated_at.replace(microsecond=0).isoformat(),
    }
