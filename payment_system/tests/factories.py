import factory

from marketplace.models import Price
from marketplace.tests.factories import PriceFactory, UserFactory
from payment_system.models import PurchaseRequest


class RequestPriceFactory(PriceFactory):
    payment_style = Price.REQUEST


class PurchaseRequestFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PurchaseRequest

    buyer = factory.SubFactory(UserFactory)
    price = factory.SubFactory(RequestPriceFactory)
    product = factory.LazyAttribute(lambda o: o.price.product)
    seller = factory.LazyAttribute(lambda o: o.product.seller)
    unit_amount = factory.LazyAttribute(lambda o: o.price.unit_amount)
    currency = factory.LazyAttribute(lambda o: o.price.currency)
    quantity = 1
    status = PurchaseRequest.PENDING
