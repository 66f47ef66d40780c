from django.contrib import admin

from .models import AddOn, Category, MenuItem, Variation, VariationGroup


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'merchant', 'sort_order', 'active']
    list_filter = ['merchant', 'active']
    ordering = ['merchant', 'sort_order']


class VariationGroupInline(admin.TabularInline):
    model = VariationGroup
    extra = 0


class VariationInline(admin.TabularInline):
    model = Variation
    extra = 0


class AddOnInline(admin.TabularInline):
    model = AddOn
    extra = 0


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = [
        'name', 'merchant', 'category', 'base_price', 'available',
        'track_inventory', 'stock_quantity', 'low_stock_threshold',
    ]
    list_filter = ['merchant', 'available', 'popular', 'track_inventory']
    search_fields = ['name', 'description']
    inlines = [VariationGroupInline, VariationInline, AddOnInline]
