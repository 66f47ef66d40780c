import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone

from authentication.models import TimeStampedModel
from inventory.models import MenuItem
from merchants.models import Merchant, PaymentMethod


class Order(TimeStampedModel):
    SERVICE_TYPE_CHOICES = (
        ("dine-in", "Dine In"),
        ("pickup", "Pickup"),
        ("delivery", "Delivery"),
    )
    STATUS_CHOICES = (
        ("pending", "Pending"),
        ("confirmed", "Confirmed"),
        ("preparing", "Preparing"),
        ("ready", "Ready"),
        ("completed", "Completed"),
        ("cancelled", "Cancelled"),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    token = models.IntegerField(default=0)
    merchant = models.ForeignKey(Merchant, on_delete=models.PROTECT, related_name='orders')

    # Customer
    customer_name = models.CharField(max_length=255)
    contact_number = models.CharField(max_length=30)
    service_type = models.CharField(max_length=20, choices=SERVICE_TYPE_CHOICES)
    address = models.TextField(blank=True, null=True)
    landmark = models.CharField(max_length=255, blank=True, null=True)
    delivery_latitude = models.FloatField(null=True, blank=True)
    delivery_longitude = models.FloatField(null=True, blank=True)
    distance_km = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True)
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    delivery_fee_breakdown = models.JSONField(null=True, blank=True)
    pickup_time = models.CharField(max_length=50, blank=True, null=True)
    party_size = models.PositiveIntegerField(null=True, blank=True)
    dine_in_time = models.DateTimeField(null=True, blank=True)

    # Payment; no payment method means cash
    payment_method = models.ForeignKey(
        PaymentMethod, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders'
    )
    reference_number = models.CharField(max_length=100, blank=True, null=True)
    receipt_url = models.URLField(max_length=500, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['merchant', 'status'], name='idx_orders_merchant_status'),
            models.Index(fields=['ip_address', 'created_at'], name='idx_orders_ip_created'),
        ]

    def save(self, *args, **kwargs):
        if self._state.adding and not self.token:
            today = timezone.localdate()
            last_token = Order.objects.filter(
                created_at__date=today,
                merchant_id=self.merchant_id,
            ).aggregate(max_token=models.Max('token'))['max_token'] or 0
            self.token = last_token + 1
        super().save(*args, **kwargs)

    def calculate_totals(self):
        """Recalculate subtotal and total from the line snapshots"""
        self.subtotal = sum((item.subtotal for item in self.items.all()), Decimal('0.00'))
        self.total = self.subtotal + (self.delivery_fee or Decimal('0.00'))

    @property
    def payment_label(self):
        return self.payment_method.name if self.payment_method_id else 'Cash'

    def __str__(self):
        return f"#{self.token} - {self.merchant.name} - {self.customer_name}"


class OrderItem(models.Model):
    """Snapshot of a cart line at checkout time"""
    order = models.ForeignKey(Order, related_name='items', on_delete=models.CASCADE)
    menu_item = models.ForeignKey(
        MenuItem, on_delete=models.SET_NULL, null=True, blank=True, related_name='order_items'
    )
    name = models.CharField(max_length=255)
    variation = models.JSONField(null=True, blank=True)
    add_ons = models.JSONField(default=list, blank=True)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1)
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = 'order_items'
        ordering = ['id']

    def save(self, *args, **kwargs):
        self.unit_price = round(self.unit_price, 2)
        self.subtotal = self.unit_price * self.quantity
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.quantity} x {self.name}"
