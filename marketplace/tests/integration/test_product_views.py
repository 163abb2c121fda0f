import uuid

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import PLACEHOLDER_PRICE_ID, Price, Product
from marketplace.tests.factories import PriceFactory, ProductFactory, SellerFactory, TagFactory, UserFactory


def product_payload(**overrides):
    payload = {
        "name": "Walnut bowl",
        "description": "Hand turned",
        "images": ["https://img.test/bowl.jpg"],
        "prices": [{"unit_amount": 4500, "currency": "USD", "is_default": True, "allocated_quantity": 2}],
    }
    payload.update(overrides)
    return payload


class ProductCreateViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.seller = SellerFactory()
        self.client.force_authenticate(user=self.seller)
        self.url = reverse("marketplace:product-create")

    def test_create_synced_product(self):
        response = self.client.post(self.url, product_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()
        self.assertIsNotNone(data["stripe_product_id"])
        self.assertEqual(data["total_quantity"], 2)
        self.assertEqual(data["prices"][0]["currency"], "usd")
        self.assertTrue(data["prices"][0]["is_synced"])
        self.assertTrue(data["is_synced"])

    def test_create_without_connected_account_uses_placeholders(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.post(self.url, product_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()["prices"][0]["stripe_price_id"], PLACEHOLDER_PRICE_ID)

    def test_requires_exactly_one_default_price(self):
        prices = [
            {"unit_amount": 1000, "is_default": True},
            {"unit_amount": 2000, "is_default": True},
        ]

        response = self.client.post(self.url, product_payload(prices=prices), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("prices", response.json())
        self.assertEqual(Product.objects.count(), 0)

    def test_rejects_zero_amount(self):
        prices = [{"unit_amount": 0, "is_default": True}]

        response = self.client.post(self.url, product_payload(prices=prices), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_rejects_two_prices_for_one_marketplace(self):
        marketplace_id = str(uuid.uuid4())
        prices = [
            {"unit_amount": 1000, "is_default": True, "marketplace_id": marketplace_id},
            {"unit_amount": 2000, "marketplace_id": marketplace_id},
        ]

        response = self.client.post(self.url, product_payload(prices=prices), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_payment_provider_failure_maps_to_502(self):
        container.payment().fail("create_product")

        response = self.client.post(self.url, product_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.json()["code"], "payment_provider_error")

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)

        response = self.client.post(self.url, product_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ProductDetailViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.seller = SellerFactory()
        self.client.force_authenticate(user=self.seller)
        created = self.client.post(reverse("marketplace:product-create"), product_payload(), format="json").json()
        self.product_id = created["id"]
        self.price_id = created["prices"][0]["id"]
        self.url = reverse("marketplace:product-detail", kwargs={"product_id": self.product_id})

    def test_get_own_product(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["name"], "Walnut bowl")

    def test_update_price_amount(self):
        prices = [{"id": self.price_id, "unit_amount": 5000, "is_default": True}]

        response = self.client.put(self.url, product_payload(name="Walnut bowl XL", prices=prices), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()
        self.assertEqual(data["name"], "Walnut bowl XL")
        self.assertEqual(data["prices"][0]["id"], self.price_id)
        self.assertEqual(data["prices"][0]["unit_amount"], 5000)
        self.assertFalse(data["needs_sync"])

    def test_other_user_cannot_update(self):
        self.client.force_authenticate(user=SellerFactory())

        response = self.client.put(self.url, product_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json()["code"], "not_product_owner")

    def test_delete(self):
        response = self.client.delete(self.url)

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(id=self.product_id).exists())

    def test_unknown_product(self):
        url = reverse("marketplace:product-detail", kwargs={"product_id": uuid.uuid4()})

        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ProductSyncViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.seller = SellerFactory()
        self.product = ProductFactory(seller=self.seller)
        PriceFactory(product=self.product)
        self.client.force_authenticate(user=self.seller)

    def test_force_sync(self):
        response = self.client.post(
            reverse("marketplace:product-sync"), {"product_id": str(self.product.id), "name": "Renamed"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["name"], "Renamed")
        self.assertNotEqual(Price.objects.get(product=self.product).stripe_price_id, PLACEHOLDER_PRICE_ID)

    def test_force_sync_without_account(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.post(reverse("marketplace:product-sync"), {"product_id": str(self.product.id)}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["code"], "stripe_account_required")

    def test_sync_all(self):
        response = self.client.post(reverse("marketplace:product-sync-all"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {"synced": [str(self.product.id)], "failed": []})


class PublicProductViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_recent_products(self):
        price = PriceFactory(unit_amount=2200)

        response = self.client.get(reverse("marketplace:product-recent"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        [card] = response.json()
        self.assertEqual(card["id"], str(price.product.id))
        self.assertEqual(card["latest_price"]["unit_amount"], 2200)

    def test_recent_products_invalid_limit(self):
        response = self.client.get(reverse("marketplace:product-recent"), {"limit": "many"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_product_tags(self):
        product = ProductFactory()
        tag = TagFactory(name="oak")
        product.product_tags.create(tag=tag)

        response = self.client.get(reverse("marketplace:product-tags", kwargs={"product_id": product.id}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), [{"value": str(tag.id), "label": "oak"}])
