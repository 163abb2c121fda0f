"""
Shared pytest fixtures.

Every test runs against in-memory payment and identity providers wired into
the service container, so no test can reach Stripe or Clerk.
"""

import itertools
import json
from typing import Any, Dict, List, Optional

import pytest

from infrastructure.container import container
from infrastructure.identity import IdentityEvent, IdentityException, IdentityProviderInterface, IdentityUser
from infrastructure.payments import (
    Charge,
    CheckoutSession,
    ConnectedAccount,
    PaymentException,
    PaymentProviderInterface,
    PaymentStatus,
    RemotePrice,
    RemoteProduct,
)


class FakePaymentProvider(PaymentProviderInterface):
    """
    In-memory payment processor.

    Remote objects are kept per connected account. ``fail(method)`` makes the
    next calls of ``method`` raise PaymentException.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self.products: Dict[str, RemoteProduct] = {}
        self.product_accounts: Dict[str, str] = {}
        self.prices: Dict[str, RemotePrice] = {}
        self.sessions: Dict[str, CheckoutSession] = {}
        self.expired: List[str] = []
        self.deleted_products: List[str] = []
        self.charges: Dict[str, List[Charge]] = {}
        self.accounts: Dict[str, str] = {}
        self.calls: List[tuple] = []
        self._failures: Dict[str, List[Optional[int]]] = {}

    def fail(self, method: str, times: Optional[int] = None, after: int = 0):
        """Fail ``method`` ``times`` times (forever when None) once ``after`` calls have succeeded."""
        self._failures[method] = [after, times]

    def _call(self, method: str, *args, **kwargs):
        self.calls.append((method, args, kwargs))
        rule = self._failures.get(method)
        if not rule:
            return
        after, times = rule
        if after > 0:
            rule[0] -= 1
            return
        if times is None:
            raise PaymentException(f"{method} failed")
        if times > 0:
            rule[1] -= 1
            raise PaymentException(f"{method} failed")

    def calls_to(self, method: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == method]

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}_{next(self._ids)}"

    def create_connected_account(self, email, refresh_url, return_url):
        self._call("create_connected_account", email)
        account_id = self._next_id("acct")
        self.accounts[account_id] = email
        return ConnectedAccount(account_id=account_id, onboarding_url=f"https://connect.test/{account_id}")

    def create_onboarding_link(self, account_id, refresh_url, return_url):
        self._call("create_onboarding_link", account_id)
        return f"https://connect.test/{account_id}/resume"

    def create_product(self, account_id, name, description="", images=None, metadata=None):
        self._call("create_product", account_id, name=name)
        product = RemoteProduct(product_id=self._next_id("prod"), name=name, metadata=dict(metadata or {}))
        self.product_accounts[product.product_id] = account_id
        self.products[product.product_id] = product
        return product

    def update_product(self, account_id, product_id, **fields):
        self._call("update_product", account_id, product_id, **fields)
        product = self.products.get(product_id)
        if product is None:
            raise PaymentException(f"No such product: {product_id}")
        if "name" in fields:
            product.name = fields["name"]
        if "active" in fields:
            product.active = fields["active"]
        return product

    def find_product_by_local_id(self, account_id, local_product_id):
        self._call("find_product_by_local_id", account_id, local_product_id)
        for product in self.products.values():
            if self.product_accounts.get(product.product_id) == account_id and product.metadata.get(
                "localProductId"
            ) == str(local_product_id):
                return product
        return None

    def delete_product(self, account_id, product_id):
        self._call("delete_product", account_id, product_id)
        self.products.pop(product_id, None)
        self.deleted_products.append(product_id)
        return True

    def create_price(self, account_id, product_id, unit_amount, currency, metadata=None):
        self._call("create_price", account_id, product_id, unit_amount=unit_amount)
        price = RemotePrice(
            price_id=self._next_id("price"),
            product_id=product_id,
            unit_amount=unit_amount,
            currency=currency,
            metadata=dict(metadata or {}),
        )
        self.prices[price.price_id] = price
        return price

    def update_price(self, account_id, price_id, metadata):
        self._call("update_price", account_id, price_id)
        price = self.prices[price_id]
        price.metadata = dict(metadata)
        return price

    def deactivate_price(self, account_id, price_id):
        self._call("deactivate_price", account_id, price_id)
        if price_id in self.prices:
            self.prices[price_id].active = False

    def list_prices(self, account_id, product_id):
        self._call("list_prices", account_id, product_id)
        return [price for price in self.prices.values() if price.product_id == product_id and price.active]

    def create_checkout_session(
        self,
        account_id,
        line_items,
        customer_email,
        application_fee_amount,
        currency,
        success_url,
        cancel_url,
        metadata=None,
    ):
        self._call(
            "create_checkout_session",
            account_id,
            line_items=line_items,
            customer_email=customer_email,
            application_fee_amount=application_fee_amount,
            metadata=metadata,
        )
        amount = 0
        for item in line_items:
            if "price" in item:
                remote = self.prices.get(item["price"])
                amount += (remote.unit_amount if remote else 0) * item["quantity"]
            else:
                amount += item["price_data"]["unit_amount"] * item["quantity"]
        session_id = self._next_id("cs")
        session = CheckoutSession(
            session_id=session_id,
            url=f"https://checkout.test/{session_id}",
            amount=amount,
            currency=currency,
            status=PaymentStatus.PENDING,
            destination_account=account_id,
            application_fee_amount=application_fee_amount,
            metadata=dict(metadata or {}),
        )
        self.sessions[session_id] = session
        return session

    def expire_checkout_session(self, account_id, session_id):
        self._call("expire_checkout_session", account_id, session_id)
        self.expired.append(session_id)

    def list_charges(self, account_id, limit=5):
        self._call("list_charges", account_id)
        return self.charges.get(account_id, [])[:limit]

    # Helpers for tests

    def products_for(self, account_id: str) -> List[RemoteProduct]:
        return [p for p in self.products.values() if self.product_accounts.get(p.product_id) == account_id]

    def active_prices_for(self, product_id: str) -> List[RemotePrice]:
        return [p for p in self.prices.values() if p.product_id == product_id and p.active]


class FakeIdentityProvider(IdentityProviderInterface):
    """In-memory identity provider. Webhooks are accepted when they carry ``svix-signature: valid``."""

    def __init__(self):
        self.users: Dict[str, IdentityUser] = {}
        self.unavailable = False

    def add_user(self, user_id: str, email: Optional[str] = None, **fields) -> IdentityUser:
        self.users[user_id] = IdentityUser(user_id=user_id, email=email, **fields)
        return self.users[user_id]

    def get_user(self, user_id: str) -> IdentityUser:
        if self.unavailable:
            raise IdentityException("Identity provider unavailable")
        return self.users.get(user_id) or IdentityUser(user_id=user_id)

    def verify_webhook(self, payload: bytes, headers: Dict[str, Any]) -> IdentityEvent:
        if headers.get("svix-signature") != "valid":
            raise IdentityException("Invalid webhook signature")
        body = json.loads(payload)
        return IdentityEvent(event_type=body["type"], data=body.get("data") or {})


@pytest.fixture
def fake_payment():
    return FakePaymentProvider()


@pytest.fixture
def fake_identity():
    return FakeIdentityProvider()


@pytest.fixture(autouse=True)
def service_container(fake_payment, fake_identity):
    """Wire the in-memory providers into the global container for every test."""
    container.configure_for_testing(payment=fake_payment, identity=fake_identity)
    yield container
    container.reset()
