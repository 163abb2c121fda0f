from django.contrib import admin

from .models import Marketplace, Price, Product, ProductTag, Tag


class PriceInline(admin.TabularInline):
    model = Price
    extra = 0
    fields = ('unit_amount', 'currency', 'is_default', 'payment_style', 'allocated_quantity',
              'marketplace', 'stripe_price_id')
    readonly_fields = ('stripe_price_id',)


class ProductTagInline(admin.TabularInline):
    model = ProductTag
    extra = 0


@admin.register(Marketplace)
class MarketplaceAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'member_count', 'created_at')
    search_fields = ('name', 'slug', 'description')
    readonly_fields = ('id', 'slug', 'created_at', 'updated_at')
    filter_horizontal = ('owners', 'members')

    def member_count(self, obj):
        return obj.members.count()
    member_count.short_description = "Members"


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'seller', 'total_quantity', 'stripe_product_id', 'needs_sync', 'created_at')
    list_filter = ('needs_sync', 'created_at')
    search_fields = ('name', 'description', 'seller__id', 'seller__slug', 'stripe_product_id')
    readonly_fields = ('id', 'stripe_product_id', 'total_quantity', 'created_at', 'updated_at')

    inlines = [PriceInline, ProductTagInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('id', 'name', 'description', 'images', 'seller')
        }),
        ('Sync', {
            'fields': ('stripe_product_id', 'needs_sync', 'total_quantity')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('seller')


@admin.register(Price)
class PriceAdmin(admin.ModelAdmin):
    list_display = ('product', 'unit_amount', 'currency', 'payment_style', 'is_default',
                    'marketplace', 'stripe_price_id')
    list_filter = ('payment_style', 'is_default', 'currency')
    search_fields = ('product__name', 'stripe_price_id')
    readonly_fields = ('id', 'created_at', 'updated_at')


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ('name', 'created_by', 'created_at')
    search_fields = ('name',)
