"""
Inventory API - Product Service Unit Tests
===========================================

What:  Tests for ProductService CRUD operations (the data access layer).
How:   Uses the in-memory FakeCollection from conftest.py and a MagicMock
       collection whose calls raise driver errors. No MongoDB needed.

What we test:
    ✅ create assigns an id and equal timestamps; rejects missing/mistyped fields
    ✅ get_by_id round-trips created records; NotFound / InvalidId
    ✅ update is partial and moves updatedAt strictly forward
    ✅ delete removes the record; a second delete is NotFound
    ✅ driver failures surface as StoreError
"""

from datetime import timedelta

import pytest
from bson import ObjectId

from app.exceptions import InvalidIdError, NotFoundError, StoreError, ValidationError
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.product_service import ProductService


class TestProductServiceCreate:
    """Tests for create()."""

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_create_returns_full_record(self, fake_collection, sample_product_data):
        """Created record carries a generated id and both timestamps."""
        product = await self.service.create(fake_collection, sample_product_data)

        assert ObjectId.is_valid(product.id)
        assert product.name == "Teclado mecánico"
        assert product.price == 89.99
        assert product.quantity == 15
        assert product.brand == "Magik"
        assert product.created_at == product.updated_at
        assert product.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_create_persists_document(self, fake_collection, sample_product_data):
        product = await self.service.create(fake_collection, sample_product_data)

        stored = fake_collection.documents[ObjectId(product.id)]
        assert stored["name"] == sample_product_data["name"]
        assert stored["createdAt"] == stored["updatedAt"]

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, fake_collection):
        """quantity and brand are optional."""
        product = await self.service.create(fake_collection, {"name": "Mouse", "price": 10})

        assert product.quantity == 0
        assert product.brand == ""
        assert isinstance(product.price, float)

    @pytest.mark.asyncio
    async def test_create_accepts_validated_model(self, fake_collection):
        payload = ProductCreate(name="Monitor", price=199.5)

        product = await self.service.create(fake_collection, payload)

        assert product.name == "Monitor"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"price": 10.0},
            {"name": "Mouse"},
            {},
            {"name": "Mouse", "price": "gratis"},
            {"name": "Mouse", "price": 10.0, "quantity": 1.5},
            {"name": "", "price": 1.0},
            {"name": "Mouse", "price": float("nan")},
            {"name": "Mouse", "price": float("inf")},
        ],
    )
    async def test_create_rejects_invalid_payload(self, fake_collection, payload):
        """Invalid name/price or wrong types raise ValidationError and store nothing."""
        with pytest.raises(ValidationError):
            await self.service.create(fake_collection, payload)

        assert fake_collection.documents == {}

    @pytest.mark.asyncio
    async def test_create_error_message_names_missing_field(self, fake_collection):
        with pytest.raises(ValidationError, match="price"):
            await self.service.create(fake_collection, {"name": "Mouse"})

    @pytest.mark.asyncio
    async def test_create_ignores_client_managed_fields(self, fake_collection):
        """Client-supplied id and timestamps never reach the store."""
        product = await self.service.create(
            fake_collection,
            {"name": "Mouse", "price": 10.0, "id": "abc", "createdAt": "2000-01-01T00:00:00Z"},
        )

        assert product.id != "abc"
        assert product.created_at.year != 2000


class TestProductServiceRead:
    """Tests for list_all() and get_by_id()."""

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_list_all_empty(self, fake_collection):
        """Empty store yields an empty list, not an error."""
        assert await self.service.list_all(fake_collection) == []

    @pytest.mark.asyncio
    async def test_list_all_returns_every_record(self, fake_collection):
        for i in range(3):
            await self.service.create(fake_collection, {"name": f"Producto {i}", "price": i + 1})

        products = await self.service.list_all(fake_collection)

        assert [p.name for p in products] == ["Producto 0", "Producto 1", "Producto 2"]

    @pytest.mark.asyncio
    async def test_get_by_id_round_trip(self, fake_collection, sample_product_data):
        created = await self.service.create(fake_collection, sample_product_data)

        fetched = await self.service.get_by_id(fake_collection, created.id)

        assert fetched == created

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, fake_collection):
        with pytest.raises(NotFoundError, match="Producto no encontrado"):
            await self.service.get_by_id(fake_collection, str(ObjectId()))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["123", "not-an-object-id", "zz" * 12])
    async def test_get_by_id_invalid_id(self, fake_collection, bad_id):
        with pytest.raises(InvalidIdError):
            await self.service.get_by_id(fake_collection, bad_id)


class TestProductServiceUpdate:
    """Tests for update()."""

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_update_is_partial(self, fake_collection, sample_product_data):
        """Only the supplied fields change; id and createdAt stay."""
        created = await self.service.create(fake_collection, sample_product_data)

        updated = await self.service.update(fake_collection, created.id, {"price": 79.99})

        assert updated.price == 79.99
        assert updated.id == created.id
        assert updated.name == created.name
        assert updated.quantity == created.quantity
        assert updated.brand == created.brand
        assert updated.created_at == created.created_at

    @pytest.mark.asyncio
    async def test_update_moves_updated_at_forward(self, fake_collection, sample_product_data):
        """Two updates in the same millisecond still produce increasing updatedAt."""
        created = await self.service.create(fake_collection, sample_product_data)

        first = await self.service.update(fake_collection, created.id, {"quantity": 1})
        second = await self.service.update(fake_collection, created.id, {"quantity": 2})

        assert first.updated_at > created.updated_at
        assert second.updated_at > first.updated_at

    @pytest.mark.asyncio
    async def test_update_after_clock_skew(self, fake_collection, sample_product_data):
        """A stored updatedAt in the future is still exceeded."""
        created = await self.service.create(fake_collection, sample_product_data)
        future = created.updated_at + timedelta(hours=1)
        fake_collection.documents[ObjectId(created.id)]["updatedAt"] = future

        updated = await self.service.update(fake_collection, created.id, {"brand": "Otra"})

        assert updated.updated_at == future + timedelta(milliseconds=1)

    @pytest.mark.asyncio
    async def test_update_reflected_by_get(self, fake_collection, sample_product_data):
        created = await self.service.create(fake_collection, sample_product_data)
        await self.service.update(fake_collection, created.id, ProductUpdate(price=50.0))

        fetched = await self.service.get_by_id(fake_collection, created.id)

        assert fetched.price == 50.0
        assert fetched.name == created.name

    @pytest.mark.asyncio
    async def test_update_not_found(self, fake_collection):
        with pytest.raises(NotFoundError):
            await self.service.update(fake_collection, str(ObjectId()), {"price": 1.0})

    @pytest.mark.asyncio
    async def test_update_invalid_id(self, fake_collection):
        with pytest.raises(InvalidIdError):
            await self.service.update(fake_collection, "bad", {"price": 1.0})

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "changes",
        [
            {"price": "caro"},
            {"quantity": "muchos"},
            {"name": None},
            {"price": None},
            {"name": ""},
            {"price": float("nan")},
            {"price": float("-inf")},
        ],
    )
    async def test_update_rejects_invalid_fields(self, fake_collection, sample_product_data, changes):
        created = await self.service.create(fake_collection, sample_product_data)

        with pytest.raises(ValidationError):
            await self.service.update(fake_collection, created.id, changes)

        fetched = await self.service.get_by_id(fake_collection, created.id)
        assert fetched == created


class TestProductServiceDelete:
    """Tests for delete()."""

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_delete_removes_record(self, fake_collection, sample_product_data):
        created = await self.service.create(fake_collection, sample_product_data)

        result = await self.service.delete(fake_collection, created.id)

        assert result.message == "Producto eliminado"
        with pytest.raises(NotFoundError):
            await self.service.get_by_id(fake_collection, created.id)

    @pytest.mark.asyncio
    async def test_second_delete_is_not_found(self, fake_collection, sample_product_data):
        created = await self.service.create(fake_collection, sample_product_data)
        await self.service.delete(fake_collection, created.id)

        with pytest.raises(NotFoundError):
            await self.service.delete(fake_collection, created.id)

    @pytest.mark.asyncio
    async def test_delete_invalid_id(self, fake_collection):
        with pytest.raises(InvalidIdError):
            await self.service.delete(fake_collection, "bad")


class TestProductServiceStoreErrors:
    """Driver failures become StoreError."""

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_create_store_error(self, failing_collection, sample_product_data):
        with pytest.raises(StoreError):
            await self.service.create(failing_collection, sample_product_data)

    @pytest.mark.asyncio
    async def test_list_store_error(self, failing_collection):
        with pytest.raises(StoreError):
            await self.service.list_all(failing_collection)

    @pytest.mark.asyncio
    async def test_get_store_error(self, failing_collection):
        with pytest.raises(StoreError):
            await self.service.get_by_id(failing_collection, str(ObjectId()))

    @pytest.mark.asyncio
    async def test_update_store_error(self, failing_collection):
        with pytest.raises(StoreError):
            await self.service.update(failing_collection, str(ObjectId()), {"price": 1.0})

    @pytest.mark.asyncio
    async def test_delete_store_error(self, failing_collection):
        with pytest.raises(StoreError) as exc_info:
            await self.service.delete(failing_collection, str(ObjectId()))

        assert exc_info.value.context["operation"] == "find_one_and_delete"
