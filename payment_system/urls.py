from django.urls import path

from .api import views

app_name = "payment_system"

urlpatterns = [
    # Checkout
    path("checkout/", views.checkout, name="checkout"),
    # Purchase requests
    path("purchase-requests/", views.purchase_requests, name="purchase-requests"),
    path(
        "purchase-requests/<uuid:request_id>/approve/",
        views.approve_purchase_request,
        name="purchase-request-approve",
    ),
    path(
        "purchase-requests/<uuid:request_id>/reject/",
        views.reject_purchase_request,
        name="purchase-request-reject",
    ),
    # Stripe Connect
    path("stripe/connect/", views.connect, name="stripe-connect"),
    path("stripe/onboarding-link/", views.onboarding_link, name="stripe-onboarding-link"),
    path("stripe/disconnect/", views.disconnect, name="stripe-disconnect"),
    path("stripe/insights-summary/", views.insights_summary, name="stripe-insights-summary"),
]
