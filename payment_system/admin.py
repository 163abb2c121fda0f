from django.contrib import admin

from .models import PurchaseRequest


@admin.register(PurchaseRequest)
class PurchaseRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'buyer', 'seller', 'product', 'unit_amount', 'quantity', 'status', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('buyer__id', 'seller__id', 'product__name', 'checkout_session_id')
    readonly_fields = ('id', 'unit_amount', 'currency', 'checkout_session_id', 'created_at', 'updated_at')
