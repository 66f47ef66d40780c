import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from authentication.models import TimeStampedModel
from merchants.models import Merchant


class Category(TimeStampedModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    merchant = models.ForeignKey(Merchant, on_delete=models.CASCADE, related_name='categories')
    name = models.CharField(max_length=100)
    icon = models.CharField(max_length=50, blank=True, default='')
    sort_order = models.IntegerField(default=0)
    active = models.BooleanField(default=True)

    def __str__(self):
        return str(self.name)

    class Meta:
        db_table = 'categories'
        ordering = ['sort_order', 'name']
        unique_together = ['merchant', 'name']
        verbose_name_plural = "Categories"


# Fields that feed MenuItem.available for tracked items
AVAILABILITY_INPUTS = frozenset({'track_inventory', 'stock_quantity', 'low_stock_threshold'})


class MenuItem(TimeStampedModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    merchant = models.ForeignKey(Merchant, on_delete=models.CASCADE, related_name='menu_items')
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='items')
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    popular = models.BooleanField(default=False)
    available = models.BooleanField(default=True)

    # Discount window, both bounds optional
    discount_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    discount_start_date = models.DateTimeField(null=True, blank=True)
    discount_end_date = models.DateTimeField(null=True, blank=True)
    discount_active = models.BooleanField(default=False)

    # Inventory
    track_inventory = models.BooleanField(default=False)
    stock_quantity = models.IntegerField(null=True, blank=True)
    low_stock_threshold = models.IntegerField(default=0)

    class Meta:
        db_table = 'menu_items'
        ordering = ['name']
        indexes = [
            models.Index(fields=['merchant', 'category'], name='idx_menu_items_merchant_cat'),
            models.Index(fields=['track_inventory'], name='idx_menu_items_track_inv'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(stock_quantity__isnull=True) | Q(stock_quantity__gte=0),
                name='menu_items_stock_quantity_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(low_stock_threshold__gte=0),
                name='menu_items_low_stock_threshold_non_negative',
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if self.category_id and self.merchant_id and self.category.merchant_id != self.merchant_id:
            raise ValidationError({'category': 'Category belongs to a different merchant.'})

    @property
    def stock_is_tracked(self):
        return self.track_inventory and self.stock_quantity is not None

    @property
    def is_low_stock(self):
        return self.stock_is_tracked and self.stock_quantity <= self.low_stock_threshold

    def sync_availability(self):
        """Derive ``available`` from stock for tracked items; untracked items keep the manual flag"""
        if self.stock_is_tracked:
            self.available = self.stock_quantity > self.low_stock_threshold
        return self.available

    def save(self, *args, **kwargs):
        self.sync_availability()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and AVAILABILITY_INPUTS.intersection(update_fields):
            kwargs['update_fields'] = set(update_fields) | {'available'}
        super().save(*args, **kwargs)


class VariationGroup(models.Model):
    """Named choice set on an item, e.g. Size or Temperature"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    menu_item = models.ForeignKey(MenuItem, on_delete=models.CASCADE, related_name='variation_groups')
    name = models.CharField(max_length=100)
    required = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.menu_item.name} - {self.name}"

    class Meta:
        db_table = 'variation_groups'
        ordering = ['sort_order', 'name']
        unique_together = ['menu_item', 'name']


class Variation(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    menu_item = models.ForeignKey(MenuItem, on_delete=models.CASCADE, related_name='variations')
    group = models.ForeignKey(
        VariationGroup, on_delete=models.CASCADE, null=True, blank=True, related_name='variations'
    )
    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    sort_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.menu_item.name} - {self.name}"

    class Meta:
        db_table = 'variations'
        ordering = ['sort_order', 'name']


class AddOn(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    menu_item = models.ForeignKey(MenuItem, on_delete=models.CASCADE, related_name='add_ons')
    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    category = models.CharField(max_length=50, default='extras')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.menu_item.name} - {self.name}"

    class Meta:
        db_table = 'add_ons'
        ordering = ['category', 'name']
