import pytest

from storefront.domain.errors import NotFoundError, UnexpectedError, ValidationError
from storefront.domain.models import UploadedImage

PNG = UploadedImage(filename="phone.PNG", content_type="image/png", data=b"\x89PNG fake")


def test_create_with_image_stores_file(product_service, image_storage):
    product = product_service.create("Smartphone", "128GB storage", 750, PNG)

    assert product.image.endswith(".png")
    assert (image_storage.directory / product.image).read_bytes() == PNG.data


def test_create_rejects_non_images(product_service, image_storage):
    text = UploadedImage(filename="notes.txt", content_type="text/plain", data=b"hello")
    with pytest.raises(ValidationError):
        product_service.create("Smartphone", "", 750, text)
    assert list(image_storage.directory.iterdir()) == []


def test_update_replaces_image(product_service, image_storage):
    product = product_service.create("Smartphone", "", 750, PNG)
    old_image = product.image

    updated = product_service.update(product.id, name="Smartphone Pro", price=900, image=PNG)

    assert updated.name == "Smartphone Pro"
    assert updated.price == 900
    assert updated.image != old_image
    assert not (image_storage.directory / old_image).exists()


def test_update_keeps_unspecified_fields(product_service):
    product = product_service.create("Smartphone", "128GB", 750)
    updated = product_service.update(product.id, price=800)
    assert updated.name == "Smartphone"
    assert updated.description == "128GB"


def test_update_missing_product(product_service):
    with pytest.raises(NotFoundError):
        product_service.update(404, name="Nothing")


def test_delete_removes_product_and_image(product_service, image_storage):
    product = product_service.create("Smartphone", "", 750, PNG)
    product_service.delete(product.id)

    assert product_service.list_all() == []
    assert not (image_storage.directory / product.image).exists()
    with pytest.raises(NotFoundError):
        product_service.get(product.id)


def test_failed_insert_discards_stored_image(product_service, persistence, image_storage, monkeypatch):
    def _fail(*args, **kwargs):
        raise UnexpectedError("disk full")

    monkeypatch.setattr(persistence, "insert_product", _fail)

    with pytest.raises(UnexpectedError):
        product_service.create("Smartphone", "", 750, PNG)
    assert list(image_storage.directory.iterdir()) == []


def test_failed_update_keeps_old_image_and_discards_new(product_service, persistence, image_storage, monkeypatch):
    product = product_service.create("Smartphone", "", 750, PNG)

    def _fail(*args, **kwargs):
        raise UnexpectedError("disk full")

    monkeypatch.setattr(persistence, "update_product", _fail)

    with pytest.raises(UnexpectedError):
        product_service.update(product.id, image=PNG)
    assert [path.name for path in image_storage.directory.iterdir()] == [product.image]
