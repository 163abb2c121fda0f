from django.urls import path

from .api import views

urlpatterns = [
    path("webhooks/clerk/", views.ClerkWebhookView.as_view(), name="clerk_webhook"),
    path("me/", views.me, name="me"),
    path("users/<slug:slug>/", views.user_by_slug, name="user_by_slug"),
]
