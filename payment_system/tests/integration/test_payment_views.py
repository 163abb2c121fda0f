import uuid

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from infrastructure.payments import Charge
from marketplace.models import Price
from marketplace.tests.factories import PriceFactory, ProductFactory, SellerFactory, UserFactory
from payment_system.models import PurchaseRequest
from payment_system.tests.factories import PurchaseRequestFactory, RequestPriceFactory


class CheckoutViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.buyer = UserFactory(email="buyer@example.com")
        self.client.force_authenticate(user=self.buyer)
        self.url = reverse("payment_system:checkout")

    def test_instant_checkout(self):
        price = PriceFactory(product=ProductFactory(seller=SellerFactory()), unit_amount=3000)

        response = self.client.post(
            self.url,
            {"items": [{"product_id": str(price.product_id), "price_id": str(price.id), "quantity": 1}]},
            format="json",
            HTTP_ORIGIN="https://shop.test",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()
        self.assertEqual(data["payment_style"], Price.INSTANT)
        self.assertEqual(data["sessions"][0]["application_fee_amount"], 300)
        self.assertEqual(data["redirect_url"], data["sessions"][0]["url"])
        [(_, _, kwargs)] = container.payment().calls_to("create_checkout_session")
        self.assertEqual(kwargs["metadata"]["userId"], self.buyer.id)

    def test_request_checkout(self):
        price = RequestPriceFactory(product=ProductFactory(seller=SellerFactory()))

        response = self.client.post(
            self.url,
            {"items": [{"product_id": str(price.product_id), "price_id": str(price.id)}]},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.json()["purchase_requests"]), 1)
        self.assertEqual(PurchaseRequest.objects.get().buyer, self.buyer)

    def test_empty_cart(self):
        response = self.client.post(self.url, {"items": []}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_mixed_cart(self):
        seller = SellerFactory()
        instant = PriceFactory(product=ProductFactory(seller=seller))
        request = RequestPriceFactory(product=ProductFactory(seller=seller))
        items = [{"product_id": str(p.product_id), "price_id": str(p.id)} for p in (instant, request)]

        response = self.client.post(self.url, {"items": items}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["code"], "mixed_payment_styles")

    def test_unknown_product(self):
        items = [{"product_id": str(uuid.uuid4()), "price_id": str(uuid.uuid4())}]

        response = self.client.post(self.url, {"items": items}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)

        response = self.client.post(self.url, {"items": []}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class PurchaseRequestViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.seller = SellerFactory()
        self.price = RequestPriceFactory(product=ProductFactory(seller=self.seller), unit_amount=5000)
        self.pending = PurchaseRequestFactory(price=self.price)

    def test_buyer_creates_request(self):
        buyer = UserFactory()
        self.client.force_authenticate(user=buyer)

        response = self.client.post(
            reverse("payment_system:purchase-requests"),
            {"product_id": str(self.price.product_id), "price_id": str(self.price.id), "quantity": 3},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()
        self.assertEqual(data["status"], PurchaseRequest.PENDING)
        self.assertEqual(data["buyer_id"], buyer.id)
        self.assertEqual(data["seller_id"], self.seller.id)
        self.assertEqual(data["unit_amount"], 5000)
        self.assertEqual(data["quantity"], 3)

    def test_list_as_seller(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.get(reverse("payment_system:purchase-requests"), {"role": "seller"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r["id"] for r in response.json()], [str(self.pending.id)])

    def test_seller_approves(self):
        self.client.force_authenticate(user=self.seller)
        url = reverse("payment_system:purchase-request-approve", kwargs={"request_id": self.pending.id})

        response = self.client.post(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()
        self.assertTrue(data["success"])
        self.assertTrue(data["checkout_url"].startswith("https://checkout.test/"))
        self.assertEqual(data["request"]["status"], PurchaseRequest.APPROVED)

        again = self.client.post(url)
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(again.json()["code"], "invalid_request_state")

    def test_buyer_cannot_approve(self):
        self.client.force_authenticate(user=self.pending.buyer)

        response = self.client.post(
            reverse("payment_system:purchase-request-approve", kwargs={"request_id": self.pending.id})
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_seller_rejects(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.post(
            reverse("payment_system:purchase-request-reject", kwargs={"request_id": self.pending.id})
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["status"], PurchaseRequest.REJECTED)

    def test_unknown_request(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.post(
            reverse("payment_system:purchase-request-reject", kwargs={"request_id": uuid.uuid4()})
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class StripeConnectViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_connect(self):
        user = UserFactory(email="maker@example.com")
        self.client.force_authenticate(user=user)

        response = self.client.post(reverse("payment_system:stripe-connect"), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(response.json(), {"url": f"https://connect.test/{user.stripe_account_id}"})

    def test_connect_rejects_invalid_email(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.post(reverse("payment_system:stripe-connect"), {"email": "nope"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_onboarding_link_without_account(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.post(reverse("payment_system:stripe-onboarding-link"))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["code"], "stripe_account_required")

    def test_disconnect(self):
        seller = SellerFactory()
        self.client.force_authenticate(user=seller)

        response = self.client.post(reverse("payment_system:stripe-disconnect"))

        self.assertEqual(response.json(), {"success": True})
        seller.refresh_from_db()
        self.assertIsNone(seller.stripe_account_id)

    def test_insights_summary(self):
        seller = SellerFactory()
        container.payment().charges[seller.stripe_account_id] = [
            Charge(charge_id="ch_1", amount=4200, currency="usd", created=1700000000)
        ]
        self.client.force_authenticate(user=seller)

        response = self.client.get(reverse("payment_system:stripe-insights-summary"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["totalRevenue"], "42.00")
        self.assertEqual(response.json()["lastTransaction"], "2023-11-14T22:13:20+00:00")
