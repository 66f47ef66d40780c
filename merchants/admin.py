from django.contrib import admin

from .models import Merchant, PaymentMethod, Promotion


@admin.register(Merchant)
class MerchantAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'active', 'featured', 'delivery_fee', 'minimum_order']
    list_filter = ['category', 'active', 'featured']
    search_fields = ['name', 'cuisine_type', 'address']


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ['name', 'account_name', 'merchant', 'active', 'sort_order']
    list_filter = ['active', 'merchant']


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    list_display = ['title', 'active', 'sort_order', 'created_at']
    list_filter = ['active']
