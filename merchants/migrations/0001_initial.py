import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models

import merchants.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Merchant',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, null=True)),
                ('logo_url', models.URLField(blank=True, max_length=500, null=True)),
                ('cover_image_url', models.URLField(blank=True, max_length=500, null=True)),
                ('category', models.CharField(choices=[('restaurant', 'Restaurant'), ('cafe', 'Cafe'), ('bakery', 'Bakery'), ('fast-food', 'Fast Food')], default='restaurant', max_length=50)),
                ('cuisine_type', models.CharField(blank=True, max_length=100, null=True)),
                ('delivery_fee', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('minimum_order', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('estimated_delivery_time', models.CharField(blank=True, max_length=50, null=True)),
                ('rating', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=3)),
                ('total_reviews', models.IntegerField(default=0)),
                ('active', models.BooleanField(default=True)),
                ('featured', models.BooleanField(default=False)),
                ('address', models.TextField(blank=True, null=True)),
                ('formatted_address', models.TextField(blank=True, null=True)),
                ('osm_place_id', models.CharField(blank=True, max_length=100, null=True)),
                ('latitude', models.FloatField(blank=True, null=True)),
                ('longitude', models.FloatField(blank=True, null=True)),
                ('contact_number', models.CharField(blank=True, max_length=30, null=True)),
                ('email', models.EmailField(blank=True, max_length=254, null=True)),
                ('opening_hours', models.JSONField(blank=True, default=dict)),
                ('payment_methods', models.JSONField(blank=True, default=list)),
                ('base_delivery_fee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('delivery_fee_per_km', models.DecimalField(decimal_places=2, default=merchants.models.default_fee_per_km, max_digits=10)),
                ('min_delivery_fee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('max_delivery_fee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('max_delivery_distance_km', models.DecimalField(blank=True, decimal_places=2, default=merchants.models.default_max_distance_km, max_digits=10, null=True)),
            ],
            options={
                'db_table': 'merchants',
                'ordering': ['-featured', 'name'],
                'indexes': [
                    models.Index(fields=['active'], name='idx_merchants_active'),
                    models.Index(fields=['featured'], name='idx_merchants_featured'),
                    models.Index(fields=['category'], name='idx_merchants_category'),
                    models.Index(fields=['latitude', 'longitude'], name='idx_merchants_lat_lng'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(delivery_fee_per_km__gte=0), name='merchants_delivery_fee_per_km_non_negative'),
                    models.CheckConstraint(condition=models.Q(('base_delivery_fee__isnull', True), ('base_delivery_fee__gte', 0), _connector='OR'), name='merchants_base_delivery_fee_non_negative'),
                    models.CheckConstraint(condition=models.Q(('min_delivery_fee__isnull', True), ('max_delivery_fee__isnull', True), ('min_delivery_fee__lte', models.F('max_delivery_fee')), _connector='OR'), name='merchants_delivery_fee_bounds'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Promotion',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=255)),
                ('subtitle', models.CharField(blank=True, max_length=255, null=True)),
                ('cta_text', models.CharField(blank=True, max_length=100, null=True)),
                ('cta_link', models.CharField(blank=True, max_length=500, null=True)),
                ('banner_image_url', models.URLField(blank=True, max_length=500, null=True)),
                ('active', models.BooleanField(default=True)),
                ('sort_order', models.IntegerField(default=0)),
            ],
            options={
                'db_table': 'promotions',
                'ordering': ['sort_order', '-created_at'],
                'indexes': [
                    models.Index(fields=['active', 'sort_order', 'created_at'], name='idx_promotions_active_sort'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PaymentMethod',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('account_number', models.CharField(max_length=100)),
                ('account_name', models.CharField(max_length=255)),
                ('qr_code_url', models.URLField(blank=True, max_length=500)),
                ('active', models.BooleanField(default=True)),
                ('sort_order', models.IntegerField(default=0)),
                ('merchant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payment_method_set', to='merchants.merchant')),
            ],
            options={
                'db_table': 'payment_methods',
                'ordering': ['sort_order', 'name'],
                'indexes': [
                    models.Index(fields=['merchant'], name='idx_payment_methods_merchant'),
                ],
            },
        ),
    ]
