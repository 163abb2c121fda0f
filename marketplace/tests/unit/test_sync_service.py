import uuid

import pytest

from infrastructure.payments import RemoteProduct
from marketplace.models import PLACEHOLDER_PRICE_ID, Price
from marketplace.services import CatalogService, SyncService
from marketplace.tests.factories import PriceFactory, ProductFactory, SellerFactory, UserFactory
from utils.service_base import ErrorCodes


def price_spec(**overrides):
    spec = {
        "id": None,
        "unit_amount": 1500,
        "currency": "usd",
        "is_default": True,
        "payment_style": Price.INSTANT,
        "allocated_quantity": 1,
        "marketplace_id": None,
    }
    spec.update(overrides)
    return spec


def scarf_data(prices):
    return {"name": "Linen scarf", "description": "", "images": [], "tag_ids": [], "prices": prices}


@pytest.fixture
def sync_service(fake_payment):
    return SyncService(payment=fake_payment)


@pytest.fixture
def seller(db):
    return SellerFactory()


@pytest.fixture
def placeholder_product(seller):
    """Product created before the seller connected their account."""
    product = ProductFactory(seller=seller, name="Linen scarf")
    PriceFactory(product=product, unit_amount=4000, is_default=True)
    PriceFactory(product=product, unit_amount=3500, is_default=False)
    return product


@pytest.mark.unit
@pytest.mark.django_db
class TestForceSync:
    def test_requires_connected_account(self, sync_service, placeholder_product):
        seller = UserFactory()

        result = sync_service.force_sync(seller, placeholder_product.id)

        assert result.ok is False
        assert result.error == ErrorCodes.STRIPE_ACCOUNT_REQUIRED

    def test_missing_product(self, sync_service, seller):
        result = sync_service.force_sync(seller, uuid.uuid4())

        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND

    def test_only_owner_can_sync(self, sync_service, placeholder_product):
        result = sync_service.force_sync(SellerFactory(), placeholder_product.id)

        assert result.error == ErrorCodes.NOT_PRODUCT_OWNER

    def test_creates_remote_product_and_prices(self, sync_service, seller, placeholder_product, fake_payment):
        result = sync_service.force_sync(seller, placeholder_product.id)

        assert result.ok is True
        placeholder_product.refresh_from_db()
        remote = fake_payment.products[placeholder_product.stripe_product_id]
        assert remote.metadata["localProductId"] == str(placeholder_product.id)
        assert placeholder_product.needs_sync is False

        for price in placeholder_product.prices.all():
            assert price.stripe_price_id != PLACEHOLDER_PRICE_ID
            assert fake_payment.prices[price.stripe_price_id].unit_amount == price.unit_amount

    def test_is_idempotent(self, sync_service, seller, placeholder_product, fake_payment):
        sync_service.force_sync(seller, placeholder_product.id)
        placeholder_product.refresh_from_db()
        first_ids = set(placeholder_product.prices.values_list("stripe_price_id", flat=True))

        result = sync_service.force_sync(seller, placeholder_product.id)

        assert result.ok is True
        assert len(fake_payment.calls_to("create_product")) == 1
        assert len(fake_payment.calls_to("create_price")) == 2
        assert len(fake_payment.products_for(seller.stripe_account_id)) == 1
        assert set(placeholder_product.prices.values_list("stripe_price_id", flat=True)) == first_ids

    def test_adopts_remote_product_found_by_metadata(self, sync_service, seller, placeholder_product, fake_payment):
        fake_payment.products["prod_existing"] = RemoteProduct(
            product_id="prod_existing", name="Linen scarf", metadata={"localProductId": str(placeholder_product.id)}
        )
        fake_payment.product_accounts["prod_existing"] = seller.stripe_account_id

        result = sync_service.force_sync(seller, placeholder_product.id)

        assert result.ok is True
        placeholder_product.refresh_from_db()
        assert placeholder_product.stripe_product_id == "prod_existing"
        assert fake_payment.calls_to("create_product") == []

    def test_name_and_description_overrides(self, sync_service, seller, placeholder_product, fake_payment):
        result = sync_service.force_sync(seller, placeholder_product.id, name="Wool scarf", description="")

        assert result.ok is True
        placeholder_product.refresh_from_db()
        assert placeholder_product.name == "Wool scarf"
        assert placeholder_product.description == ""
        assert fake_payment.products[placeholder_product.stripe_product_id].name == "Wool scarf"

    def test_partial_failure_keeps_progress(self, sync_service, seller, placeholder_product, fake_payment):
        fake_payment.fail("create_price", times=1, after=1)

        result = sync_service.force_sync(seller, placeholder_product.id)

        assert result.ok is False
        assert result.error == ErrorCodes.PAYMENT_PROVIDER_ERROR
        placeholder_product.refresh_from_db()
        assert placeholder_product.stripe_product_id is not None
        assert placeholder_product.needs_sync is True
        assert placeholder_product.prices.filter(stripe_price_id=PLACEHOLDER_PRICE_ID).count() == 1

        retry = sync_service.force_sync(seller, placeholder_product.id)

        assert retry.ok is True
        assert len(fake_payment.calls_to("create_product")) == 1
        assert placeholder_product.prices.filter(stripe_price_id=PLACEHOLDER_PRICE_ID).count() == 0


@pytest.mark.unit
@pytest.mark.django_db
class TestRemotePriceReconciliation:
    def _synced_product(self, fake_payment, seller):
        prices = [price_spec(unit_amount=4000, allocated_quantity=2), price_spec(unit_amount=3500, is_default=False)]
        return CatalogService(payment=fake_payment).create_product(seller, scarf_data(prices)).value

    def test_retires_price_left_active_by_failed_update(self, sync_service, seller, fake_payment):
        product = self._synced_product(fake_payment, seller)
        keep, drop = product.prices.order_by("-unit_amount")
        fake_payment.fail("deactivate_price", times=1)
        CatalogService(payment=fake_payment).update_product(
            seller, product.id, scarf_data([price_spec(id=keep.id, unit_amount=4000, allocated_quantity=2)])
        )
        product.refresh_from_db()
        assert product.needs_sync is True
        assert fake_payment.prices[drop.stripe_price_id].active is True

        result = sync_service.force_sync(seller, product.id)

        assert result.ok is True
        product.refresh_from_db()
        assert product.needs_sync is False
        assert fake_payment.prices[drop.stripe_price_id].active is False
        assert [p.price_id for p in fake_payment.active_prices_for(product.stripe_product_id)] == [
            keep.stripe_price_id
        ]

    def test_pushes_metadata_of_prices_in_use(self, sync_service, seller, fake_payment):
        product = self._synced_product(fake_payment, seller)
        price = product.prices.get(unit_amount=3500)
        Price.objects.filter(id=price.id).update(allocated_quantity=7)

        result = sync_service.force_sync(seller, product.id)

        assert result.ok is True
        assert fake_payment.prices[price.stripe_price_id].metadata["allocatedQuantity"] == "7"
        assert fake_payment.calls_to("deactivate_price") == []

    def test_listing_failure_keeps_flag(self, sync_service, seller, fake_payment):
        product = self._synced_product(fake_payment, seller)
        fake_payment.fail("list_prices")

        result = sync_service.force_sync(seller, product.id)

        assert result.error == ErrorCodes.PAYMENT_PROVIDER_ERROR
        product.refresh_from_db()
        assert product.needs_sync is True


@pytest.mark.unit
@pytest.mark.django_db
class TestSyncAll:
    def test_syncs_only_unsynced_products(self, sync_service, seller, placeholder_product, fake_payment):
        synced = ProductFactory(seller=seller, stripe_product_id="prod_done")
        PriceFactory(product=synced, stripe_price_id="price_done")
        flagged = ProductFactory(seller=seller, needs_sync=True)
        PriceFactory(product=flagged)

        result = sync_service.sync_all(seller)

        assert result.ok is True
        assert set(result.value["synced"]) == {str(placeholder_product.id), str(flagged.id)}
        assert result.value["failed"] == []

    def test_reports_failures_per_product(self, sync_service, seller, placeholder_product, fake_payment):
        fake_payment.fail("create_product")

        result = sync_service.sync_all(seller)

        assert result.ok is True
        assert result.value["synced"] == []
        assert result.value["failed"][0]["product_id"] == str(placeholder_product.id)

    def test_requires_connected_account(self, sync_service):
        result = sync_service.sync_all(UserFactory())

        assert result.error == ErrorCodes.STRIPE_ACCOUNT_REQUIRED
