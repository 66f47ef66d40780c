import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q

from authentication.models import TimeStampedModel


def default_fee_per_km():
    return Decimal(settings.DEFAULT_DELIVERY_FEE_PER_KM)


def default_max_distance_km():
    return Decimal(settings.DEFAULT_MAX_DELIVERY_DISTANCE_KM)


class Merchant(TimeStampedModel):
    """A storefront owning its own categories and menu items"""
    CATEGORY_CHOICES = [
        ('restaurant', 'Restaurant'),
        ('cafe', 'Cafe'),
        ('bakery', 'Bakery'),
        ('fast-food', 'Fast Food'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    logo_url = models.URLField(max_length=500, blank=True, null=True)
    cover_image_url = models.URLField(max_length=500, blank=True, null=True)
    category = models.CharField(max_length=50, choices=CATEGORY_CHOICES, default='restaurant')
    cuisine_type = models.CharField(max_length=100, blank=True, null=True)

    # Ordering rules
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    minimum_order = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    estimated_delivery_time = models.CharField(max_length=50, blank=True, null=True)

    rating = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal('0.00'))
    total_reviews = models.IntegerField(default=0)
    active = models.BooleanField(default=True)
    featured = models.BooleanField(default=False)

    # Location & Contact
    address = models.TextField(blank=True, null=True)
    formatted_address = models.TextField(blank=True, null=True)
    osm_place_id = models.CharField(max_length=100, blank=True, null=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    contact_number = models.CharField(max_length=30, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    opening_hours = models.JSONField(default=dict, blank=True)  # {"monday": "09:00-22:00"}
    payment_methods = models.JSONField(default=list, blank=True)  # ["gcash", "maya", "cash"]

    # Distance based delivery pricing
    base_delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    delivery_fee_per_km = models.DecimalField(max_digits=10, decimal_places=2, default=default_fee_per_km)
    min_delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    max_delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    max_delivery_distance_km = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, default=default_max_distance_km
    )

    class Meta:
        db_table = 'merchants'
        ordering = ['-featured', 'name']
        indexes = [
            models.Index(fields=['active'], name='idx_merchants_active'),
            models.Index(fields=['featured'], name='idx_merchants_featured'),
            models.Index(fields=['category'], name='idx_merchants_category'),
            models.Index(fields=['latitude', 'longitude'], name='idx_merchants_lat_lng'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(delivery_fee_per_km__gte=0),
                name='merchants_delivery_fee_per_km_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(base_delivery_fee__isnull=True) | Q(base_delivery_fee__gte=0),
                name='merchants_base_delivery_fee_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(min_delivery_fee__isnull=True)
                | Q(max_delivery_fee__isnull=True)
                | Q(min_delivery_fee__lte=models.F('max_delivery_fee')),
                name='merchants_delivery_fee_bounds',
            ),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.formatted_address and self.address:
            self.formatted_address = self.address
        super().save(*args, **kwargs)

    @property
    def has_location(self):
        return self.latitude is not None and self.longitude is not None


class PaymentMethod(TimeStampedModel):
    """Manual payment channel shown at checkout (e-wallet or bank account)"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # NULL means the method is shared by every merchant
    merchant = models.ForeignKey(
        Merchant, on_delete=models.CASCADE, null=True, blank=True, related_name='payment_method_set'
    )
    name = models.CharField(max_length=100)
    account_number = models.CharField(max_length=100)
    account_name = models.CharField(max_length=255)
    qr_code_url = models.URLField(max_length=500, blank=True)
    active = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        db_table = 'payment_methods'
        ordering = ['sort_order', 'name']
        indexes = [
            models.Index(fields=['merchant'], name='idx_payment_methods_merchant'),
        ]

    def __str__(self):
        return f"{self.name} ({self.account_name})"

    def is_usable_by(self, merchant):
        return self.active and (self.merchant_id is None or self.merchant_id == merchant.pk)

    @classmethod
    def available_for(cls, merchant):
        return cls.objects.filter(
            Q(merchant=merchant) | Q(merchant__isnull=True),
            active=True,
        ).order_by('sort_order', 'name')


class Promotion(TimeStampedModel):
    """Homepage carousel banner"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    subtitle = models.CharField(max_length=255, blank=True, null=True)
    cta_text = models.CharField(max_length=100, blank=True, null=True)
    cta_link = models.CharField(max_length=500, blank=True, null=True)
    banner_image_url = models.URLField(max_length=500, blank=True, null=True)
    active = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        db_table = 'promotions'
        ordering = ['sort_order', '-created_at']
        indexes = [
            models.Index(fields=['active', 'sort_order', 'created_at'], name='idx_promotions_active_sort'),
        ]

    def __str__(self):
        return self.title
