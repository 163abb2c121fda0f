import pytest

from authentication.domain.models import User
from authentication.domain.services import UserService
from authentication.domain.services.user_service import default_user_slug
from infrastructure.identity import IdentityEvent
from marketplace.tests.factories import UserFactory
from utils.service_base import ErrorCodes


def created_event(user_id="user_2abcDEF", email="maker@example.com"):
    return IdentityEvent(
        event_type="user.created",
        data={
            "id": user_id,
            "primary_email_address_id": "idn_1",
            "email_addresses": [{"id": "idn_1", "email_address": email}],
        },
    )


@pytest.fixture
def user_service(fake_identity):
    return UserService(identity=fake_identity)


@pytest.mark.unit
class TestDefaultUserSlug:
    def test_uses_first_five_characters(self):
        assert default_user_slug("user_2abcDEF") == "user-user"

    def test_is_lowercased(self):
        assert default_user_slug("ABCDEFG") == "user-abcde"


@pytest.mark.unit
@pytest.mark.django_db
class TestHandleEvent:
    def test_user_created(self, user_service):
        result = user_service.handle_event(created_event())

        assert result.ok is True
        user = User.objects.get(id="user_2abcDEF")
        assert user.email == "maker@example.com"
        assert user.slug == "user-user"
        assert user.username == "user_2abcDEF"

    def test_user_created_twice_is_idempotent(self, user_service):
        user_service.handle_event(created_event())
        user_service.handle_event(created_event())

        assert User.objects.filter(id="user_2abcDEF").count() == 1

    def test_slug_collision_gets_suffix(self, user_service):
        user_service.handle_event(created_event(user_id="abcde111"))
        user_service.handle_event(created_event(user_id="abcde222"))

        assert User.objects.get(id="abcde222").slug == "user-abcde-1"

    def test_user_deleted(self, user_service):
        UserFactory(id="user_gone")

        result = user_service.handle_event(IdentityEvent(event_type="user.deleted", data={"id": "user_gone"}))

        assert result.ok is True
        assert not User.objects.filter(id="user_gone").exists()

    def test_delete_unknown_user_is_ignored(self, user_service):
        result = user_service.handle_event(IdentityEvent(event_type="user.deleted", data={"id": "nobody"}))

        assert result.ok is True

    def test_other_events_are_acknowledged(self, user_service):
        result = user_service.handle_event(IdentityEvent(event_type="session.created", data={"id": "sess_1"}))

        assert result.ok is True
        assert User.objects.count() == 0

    def test_event_without_user_id(self, user_service):
        result = user_service.handle_event(IdentityEvent(event_type="user.created", data={}))

        assert result.error == ErrorCodes.VALIDATION_ERROR


@pytest.mark.unit
@pytest.mark.django_db
class TestEnsureUser:
    def test_creates_missing_user(self, user_service):
        user = user_service.ensure_user("user_lazy")

        assert user.pk == "user_lazy"
        assert user.slug == "user-user"
        assert user.email == ""

    def test_fills_missing_email_on_existing_user(self, user_service):
        UserFactory(id="user_known", email="")

        user = user_service.ensure_user("user_known", email="late@example.com")

        assert user.email == "late@example.com"


@pytest.mark.unit
@pytest.mark.django_db
class TestResolveEmail:
    def test_local_email_wins(self, user_service, fake_identity):
        fake_identity.unavailable = True
        user = UserFactory(email="local@example.com")

        assert user_service.resolve_email(user).value == "local@example.com"

    def test_fetches_and_caches_provider_email(self, user_service, fake_identity):
        user = UserFactory(email="")
        fake_identity.add_user(user.id, email="remote@example.com")

        result = user_service.resolve_email(user)

        assert result.value == "remote@example.com"
        user.refresh_from_db()
        assert user.email == "remote@example.com"

    def test_no_email_anywhere(self, user_service):
        result = user_service.resolve_email(UserFactory(email=""))

        assert result.error == ErrorCodes.MISSING_BUYER_EMAIL

    def test_provider_unavailable(self, user_service, fake_identity):
        fake_identity.unavailable = True

        result = user_service.resolve_email(UserFactory(email=""))

        assert result.error == ErrorCodes.IDENTITY_PROVIDER_ERROR


@pytest.mark.unit
@pytest.mark.django_db
class TestSlugs:
    def test_generate_missing_slugs(self, user_service):
        UserFactory(id="zzzzz1", slug=None)
        UserFactory(id="zzzzz2", slug=None)
        UserFactory(id="other", slug="custom")

        updated = user_service.generate_missing_slugs()

        assert updated == 2
        assert set(User.objects.filter(id__startswith="zzzzz").values_list("slug", flat=True)) == {
            "user-zzzzz",
            "user-zzzzz-1",
        }
        assert User.objects.get(id="other").slug == "custom"

    def test_get_by_slug(self, user_service):
        user = UserFactory(slug="maker")

        assert user_service.get_by_slug("maker").value == user
        assert user_service.get_by_slug("missing").error == ErrorCodes.USER_NOT_FOUND
