import uuid

import factory
from django.contrib.auth import get_user_model
from django.utils.text import slugify

from marketplace.models import PLACEHOLDER_PRICE_ID, Marketplace, Price, Product, ProductTag, Tag

User = get_user_model()


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    id = factory.Sequence(lambda n: f"user_{uuid.uuid4().hex[:8]}{n}")
    username = factory.LazyAttribute(lambda o: o.id)
    slug = factory.LazyAttribute(lambda o: slugify(o.id))
    email = factory.Sequence(lambda n: f"user_{n}@example.com")
    is_active = True
    role = User.ROLE_USER


class SellerFactory(UserFactory):
    """Artisan with a connected payment account."""

    role = User.ROLE_ARTISAN
    email = factory.Sequence(lambda n: f"seller_{n}@example.com")
    stripe_account_id = factory.Sequence(lambda n: f"acct_seller_{n}")


class MarketplaceFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Marketplace

    name = factory.Sequence(lambda n: f"Market {n}")
    slug = factory.LazyAttribute(lambda o: slugify(o.name))
    description = factory.Faker("sentence", nb_words=8)

    @factory.post_generation
    def owner(self, create, extracted, **kwargs):
        if create and extracted:
            self.owners.add(extracted)
            self.members.add(extracted)


class ProductFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Product

    id = factory.LazyFunction(uuid.uuid4)
    name = factory.Sequence(lambda n: f"Product {n}")
    description = factory.Faker("paragraph", nb_sentences=3)
    images = factory.LazyFunction(list)
    seller = factory.SubFactory(SellerFactory)
    stripe_product_id = None
    needs_sync = False


class PriceFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Price

    product = factory.SubFactory(ProductFactory)
    unit_amount = 1500
    currency = "usd"
    is_default = True
    payment_style = Price.INSTANT
    allocated_quantity = 0
    stripe_price_id = PLACEHOLDER_PRICE_ID


class TagFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Tag

    name = factory.Sequence(lambda n: f"tag-{n}")
    created_by = ""


class ProductTagFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ProductTag

    product = factory.SubFactory(ProductFactory)
    tag = factory.SubFactory(TagFactory)
