from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['menu_item', 'name', 'variation', 'add_ons', 'unit_price', 'quantity', 'subtotal']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['token', 'merchant', 'customer_name', 'service_type', 'total', 'status', 'created_at']
    list_filter = ['status', 'service_type', 'merchant']
    search_fields = ['customer_name', 'contact_number', 'reference_number']
    inlines = [OrderItemInline]
