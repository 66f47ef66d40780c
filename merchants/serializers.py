from rest_framework import serializers

from .models import Merchant, PaymentMethod, Promotion


class MerchantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Merchant
        fields = [
            'id', 'name', 'description', 'logo_url', 'cover_image_url', 'category',
            'cuisine_type', 'delivery_fee', 'minimum_order', 'estimated_delivery_time',
            'rating', 'total_reviews', 'active', 'featured', 'address', 'formatted_address',
            'osm_place_id', 'latitude', 'longitude', 'contact_number', 'email',
            'opening_hours', 'payment_methods', 'base_delivery_fee', 'delivery_fee_per_km',
            'min_delivery_fee', 'max_delivery_fee', 'max_delivery_distance_km',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']

    NON_NEGATIVE_FIELDS = [
        'delivery_fee', 'minimum_order', 'base_delivery_fee', 'delivery_fee_per_km',
        'min_delivery_fee', 'max_delivery_fee', 'max_delivery_distance_km',
    ]

    def _current(self, attrs, field):
        if field in attrs:
            return attrs[field]
        if self.instance is not None:
            return getattr(self.instance, field)
        return None

    def validate_latitude(self, value):
        if value is not None and not -90 <= value <= 90:
            raise serializers.ValidationError("Latitude must be between -90 and 90.")
        return value

    def validate_longitude(self, value):
        if value is not None and not -180 <= value <= 180:
            raise serializers.ValidationError("Longitude must be between -180 and 180.")
        return value

    def validate(self, attrs):
        errors = {}
        for field in self.NON_NEGATIVE_FIELDS:
            value = attrs.get(field)
            if value is not None and value < 0:
                errors[field] = "Must be zero or greater."

        min_fee = self._current(attrs, 'min_delivery_fee')
        max_fee = self._current(attrs, 'max_delivery_fee')
        if min_fee is not None and max_fee is not None and min_fee > max_fee:
            errors['min_delivery_fee'] = "Minimum delivery fee cannot exceed the maximum delivery fee."

        if errors:
            raise serializers.ValidationError(errors)

        if 'address' in attrs and not self._current(attrs, 'formatted_address'):
            attrs['formatted_address'] = attrs['address']
        return attrs


class MerchantListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Merchant
        fields = [
            'id', 'name', 'description', 'logo_url', 'cover_image_url', 'category',
            'cuisine_type', 'delivery_fee', 'minimum_order', 'estimated_delivery_time',
            'rating', 'total_reviews', 'active', 'featured', 'formatted_address',
            'latitude', 'longitude',
        ]


class PaymentMethodSerializer(serializers.ModelSerializer):
    merchant = serializers.PrimaryKeyRelatedField(
        queryset=Merchant.objects.all(),
        allow_null=True,
        required=False,
    )
    merchant_name = serializers.CharField(source='merchant.name', read_only=True, default=None)

    class Meta:
        model = PaymentMethod
        fields = [
            'id', 'name', 'account_number', 'account_name', 'qr_code_url',
            'merchant', 'merchant_name', 'active', 'sort_order', 'created_at', 'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']

    def update(self, instance, validated_data):
        # Only keys present in the payload are written, so an explicit null
        # clears the merchant while an omitted key keeps it.
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance


class PromotionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Promotion
        fields = [
            'id', 'title', 'subtitle', 'cta_text', 'cta_link', 'banner_image_url',
            'active', 'sort_order', 'created_at', 'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']


class DeliveryQuoteRequestSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)


class DeliveryQuoteSerializer(serializers.Serializer):
    merchant_id = serializers.CharField()
    distance_km = serializers.FloatField(allow_null=True)
    delivery_fee = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    is_deliverable = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
    breakdown = serializers.DictField()
