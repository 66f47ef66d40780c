from rest_framework import serializers

from clickeats.uploads import validate_image_upload
from inventory.models import AddOn, MenuItem, Variation
from merchants.models import PaymentMethod

from .models import Order, OrderItem


# Cart
class CartLineSerializer(serializers.Serializer):
    key = serializers.CharField()
    menu_item = serializers.UUIDField(source='item.pk')
    name = serializers.CharField(source='item.name')
    image_url = serializers.CharField(source='item.image_url', allow_null=True)
    merchant = serializers.UUIDField(source='merchant_id')
    available = serializers.BooleanField(source='item.available')
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    variation = serializers.SerializerMethodField()
    add_ons = serializers.SerializerMethodField()

    def get_variation(self, line):
        return line.describe_variation()

    def get_add_ons(self, line):
        return line.describe_add_ons()


def cart_payload(cart):
    return {
        'lines': CartLineSerializer(list(cart), many=True).data,
        'total_items': cart.total_items(),
        'total_price': str(cart.total_price()),
        'merchants': [str(merchant_id) for merchant_id in cart.lines_by_merchant()],
    }


class CartAddOnSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class AddToCartSerializer(serializers.Serializer):
    menu_item = serializers.PrimaryKeyRelatedField(
        queryset=MenuItem.objects.select_related('merchant').prefetch_related('variation_groups')
    )
    quantity = serializers.IntegerField(min_value=1, default=1)
    variation = serializers.PrimaryKeyRelatedField(
        queryset=Variation.objects.all(), allow_null=True, required=False
    )
    # {group_id: variation_id}
    selected_variations = serializers.DictField(child=serializers.UUIDField(), required=False)
    add_ons = CartAddOnSerializer(many=True, required=False)

    def validate(self, attrs):
        selected = attrs.get('selected_variations') or {}
        variations = {
            variation.pk: variation
            for variation in Variation.objects.filter(pk__in=selected.values()).select_related('group')
        }
        resolved = {}
        for group_id, variation_id in selected.items():
            if variation_id not in variations:
                raise serializers.ValidationError({'selected_variations': f"Unknown variation {variation_id}."})
            resolved[group_id] = variations[variation_id]
        attrs['selected_variations'] = resolved

        requested = attrs.get('add_ons') or []
        add_ons = {
            add_on.pk: add_on
            for add_on in AddOn.objects.filter(pk__in=[entry['id'] for entry in requested])
        }
        pairs = []
        for entry in requested:
            if entry['id'] not in add_ons:
                raise serializers.ValidationError({'add_ons': f"Unknown add-on {entry['id']}."})
            pairs.append((add_ons[entry['id']], entry['quantity']))
        attrs['add_ons'] = pairs
        return attrs


class UpdateCartLineSerializer(serializers.Serializer):
    # Zero or less removes the line
    quantity = serializers.IntegerField()


# Checkout
class CheckoutSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=255)
    contact_number = serializers.CharField(max_length=30)
    service_type = serializers.ChoiceField(choices=Order.SERVICE_TYPE_CHOICES)
    address = serializers.CharField(required=False, allow_blank=True)
    landmark = serializers.CharField(required=False, allow_blank=True, max_length=255)
    delivery_latitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    delivery_longitude = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)
    pickup_time = serializers.CharField(required=False, allow_blank=True, max_length=50)
    party_size = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    dine_in_time = serializers.DateTimeField(required=False, allow_null=True)
    payment_method = serializers.PrimaryKeyRelatedField(
        queryset=PaymentMethod.objects.filter(active=True), required=False, allow_null=True
    )
    reference_number = serializers.CharField(required=False, allow_blank=True, max_length=100)
    notes = serializers.CharField(required=False, allow_blank=True)
    receipt = serializers.ImageField(required=False, allow_null=True)

    def validate_receipt(self, value):
        if value is None:
            return value
        return validate_image_upload(value)

    def validate(self, attrs):
        service_type = attrs['service_type']
        errors = {}
        if service_type == 'delivery':
            if not attrs.get('address'):
                errors['address'] = "Delivery address is required."
            has_lat = attrs.get('delivery_latitude') is not None
            has_lng = attrs.get('delivery_longitude') is not None
            if has_lat != has_lng:
                errors['delivery_latitude'] = "Latitude and longitude must be sent together."
        elif service_type == 'pickup':
            if not attrs.get('pickup_time'):
                errors['pickup_time'] = "Pickup time is required."
        elif service_type == 'dine-in':
            if not attrs.get('party_size'):
                errors['party_size'] = "Party size is required."
            if not attrs.get('dine_in_time'):
                errors['dine_in_time'] = "Preferred dine-in time is required."

        if attrs.get('payment_method') is not None and not attrs.get('receipt'):
            errors['receipt'] = "Please upload your payment receipt."

        if errors:
            raise serializers.ValidationError(errors)
        return attrs


# Orders
class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ['id', 'menu_item', 'name', 'variation', 'add_ons', 'unit_price', 'quantity', 'subtotal']


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    merchant_name = serializers.CharField(source='merchant.name', read_only=True)
    payment_method_name = serializers.CharField(source='payment_label', read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'token', 'merchant', 'merchant_name', 'customer_name', 'contact_number',
            'service_type', 'address', 'landmark', 'delivery_latitude', 'delivery_longitude',
            'distance_km', 'delivery_fee', 'delivery_fee_breakdown', 'pickup_time', 'party_size',
            'dine_in_time', 'payment_method', 'payment_method_name', 'reference_number',
            'receipt_url', 'notes', 'subtotal', 'total', 'status', 'items',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class OrderStatusSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = ['id', 'status', 'updated_at']
        read_only_fields = ['id', 'updated_at']
