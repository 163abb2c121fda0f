import uuid

import pytest

from marketplace.models import Marketplace
from marketplace.services import MarketplaceService
from marketplace.tests.factories import MarketplaceFactory, UserFactory
from utils.service_base import ErrorCodes


@pytest.fixture
def marketplace_service():
    return MarketplaceService()


@pytest.fixture
def owner(db):
    return UserFactory()


@pytest.mark.unit
@pytest.mark.django_db
class TestMarketplaceService:
    def test_creator_is_owner_and_member(self, marketplace_service, owner):
        result = marketplace_service.create_marketplace(owner, {"name": "  Potters Guild ", "description": "Clay"})

        assert result.ok is True
        marketplace = result.value
        assert marketplace.name == "Potters Guild"
        assert marketplace.slug == "potters-guild"
        assert marketplace.is_owner(owner)
        assert marketplace.is_member(owner)

    def test_slug_collisions_get_counter_suffix(self, marketplace_service, owner):
        first = marketplace_service.create_marketplace(owner, {"name": "Potters Guild"}).value
        second = marketplace_service.create_marketplace(owner, {"name": "Potters guild"}).value
        third = marketplace_service.create_marketplace(owner, {"name": "Potters Guild"}).value

        assert [first.slug, second.slug, third.slug] == ["potters-guild", "potters-guild-1", "potters-guild-2"]

    def test_blank_name_rejected(self, marketplace_service, owner):
        result = marketplace_service.create_marketplace(owner, {"name": "   "})

        assert result.ok is False
        assert result.error == ErrorCodes.VALIDATION_ERROR
        assert Marketplace.objects.count() == 0

    def test_join_and_leave(self, marketplace_service, owner):
        marketplace = MarketplaceFactory(owner=owner)
        member = UserFactory()

        joined = marketplace_service.join(member, marketplace.id)
        assert joined.ok is True
        assert marketplace.is_member(member)

        left = marketplace_service.leave(member, marketplace.id)
        assert left.ok is True
        assert not marketplace.is_member(member)

    def test_join_twice(self, marketplace_service, owner):
        marketplace = MarketplaceFactory(owner=owner)
        member = UserFactory()
        marketplace_service.join(member, marketplace.id)

        result = marketplace_service.join(member, marketplace.id)

        assert result.error == ErrorCodes.ALREADY_MEMBER

    def test_owner_cannot_leave(self, marketplace_service, owner):
        marketplace = MarketplaceFactory(owner=owner)

        result = marketplace_service.leave(owner, marketplace.id)

        assert result.error == ErrorCodes.OWNER_CANNOT_LEAVE
        assert marketplace.is_member(owner)

    def test_leave_without_membership(self, marketplace_service, owner):
        marketplace = MarketplaceFactory(owner=owner)

        result = marketplace_service.leave(UserFactory(), marketplace.id)

        assert result.error == ErrorCodes.NOT_MEMBER

    def test_unknown_marketplace(self, marketplace_service, owner):
        assert marketplace_service.join(owner, uuid.uuid4()).error == ErrorCodes.MARKETPLACE_NOT_FOUND
        assert marketplace_service.leave(owner, uuid.uuid4()).error == ErrorCodes.MARKETPLACE_NOT_FOUND

    def test_list_for_user_includes_owned_and_joined(self, marketplace_service, owner):
        owned = MarketplaceFactory(owner=owner)
        joined = MarketplaceFactory(owner=UserFactory())
        joined.members.add(owner)
        MarketplaceFactory(owner=UserFactory())

        marketplaces = list(marketplace_service.list_for_user(owner))

        assert set(marketplaces) == {owned, joined}
        assert marketplace_service.list_all().count() == 3

    def test_get_by_slug(self, marketplace_service, owner):
        marketplace = MarketplaceFactory(owner=owner, name="Weavers")

        assert marketplace_service.get_by_slug("weavers").value == marketplace
        assert marketplace_service.get_by_slug("nope").error == ErrorCodes.MARKETPLACE_NOT_FOUND
