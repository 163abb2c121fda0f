from django.contrib.auth.models import AbstractUser
from django.contrib.auth.models import UserManager as DjangoUserManager
from django.db import models


class UserManager(DjangoUserManager):
    """Accounts created locally (``createsuperuser``) use their username as the provider id."""

    def _create_user(self, username, email, password, **extra_fields):
        extra_fields.setdefault("id", username)
        return super()._create_user(username, email, password, **extra_fields)


class User(AbstractUser):
    """
    Local mirror of an identity-provider user.

    The primary key is the provider's user id; it is never generated locally.
    Rows are created by the ``user.created`` webhook or lazily on the first
    authenticated request, and removed by the ``user.deleted`` webhook.
    """

    ROLE_USER = "user"
    ROLE_ARTISAN = "artisan"

    ROLE_CHOICES = [
        (ROLE_USER, "User"),
        (ROLE_ARTISAN, "Artisan"),
    ]

    id = models.CharField(primary_key=True, max_length=64, editable=False)
    email = models.EmailField(blank=True)
    slug = models.SlugField(max_length=100, unique=True, null=True, blank=True)

    # Role system - simple field
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_USER)

    # Stripe Connect fields
    stripe_account_id = models.CharField(max_length=255, blank=True, null=True, unique=True)

    objects = UserManager()

    class Meta:
        app_label = "authentication"
        ordering = ["date_joined"]

    def save(self, *args, **kwargs):
        # AbstractUser requires a unique username; the provider id already is one
        if not self.username:
            self.username = self.id
        super().save(*args, **kwargs)

    @property
    def has_connected_account(self) -> bool:
        return bool(self.stripe_account_id)

    @property
    def is_artisan(self) -> bool:
        return self.role == self.ROLE_ARTISAN

    def __str__(self):
        return self.slug or self.id
