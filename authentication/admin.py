from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """Users mirrored from the identity provider"""

    list_display = ["id", "slug", "email", "role", "stripe_account_id", "date_joined"]
    list_filter = ["role", "is_staff", "is_active"]
    search_fields = ["id", "slug", "email"]
    readonly_fields = ["id", "date_joined", "last_login"]
    ordering = ["-date_joined"]

    fieldsets = (
        ("Identity", {"fields": ("id", "username", "slug", "email", "first_name", "last_name")}),
        ("Marketplace", {"fields": ("role", "stripe_account_id")}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Timestamps", {"fields": ("date_joined", "last_login")}),
    )
