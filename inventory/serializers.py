from django.db import transaction
from rest_framework import serializers

from merchants.models import Merchant

from .models import AddOn, Category, MenuItem, Variation, VariationGroup
from .pricing import effective_price, is_discount_active


class VariationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Variation
        fields = ['id', 'name', 'price', 'sort_order']


class VariationGroupSerializer(serializers.ModelSerializer):
    variations = VariationSerializer(many=True, required=False)

    class Meta:
        model = VariationGroup
        fields = ['id', 'name', 'required', 'sort_order', 'variations']


class AddOnSerializer(serializers.ModelSerializer):
    class Meta:
        model = AddOn
        fields = ['id', 'name', 'price', 'category']

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price cannot be negative.")
        return value


class CategorySerializer(serializers.ModelSerializer):
    items_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ['id', 'merchant', 'name', 'icon', 'sort_order', 'active', 'items_count', 'created_at']
        read_only_fields = ['created_at', 'items_count']
        validators = []

    def get_items_count(self, obj):
        return obj.items.count()

    def validate(self, attrs):
        """Category names are unique within a merchant"""
        merchant = attrs.get('merchant', getattr(self.instance, 'merchant', None))
        name = attrs.get('name', getattr(self.instance, 'name', None))
        queryset = Category.objects.filter(merchant=merchant, name=name)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError({'name': "Category with this name already exists for this merchant."})
        return attrs


class CategoryReorderSerializer(serializers.Serializer):
    merchant = serializers.PrimaryKeyRelatedField(queryset=Merchant.objects.all())
    category_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)

    def validate(self, attrs):
        ids = attrs['category_ids']
        if len(set(ids)) != len(ids):
            raise serializers.ValidationError({'category_ids': "Duplicate category ids."})
        found = Category.objects.filter(merchant=attrs['merchant'], pk__in=ids).count()
        if found != len(ids):
            raise serializers.ValidationError({'category_ids': "Every category must belong to the merchant."})
        return attrs


class MenuItemSerializer(serializers.ModelSerializer):
    """Read representation with pricing and customization options"""
    category_name = serializers.CharField(source='category.name', read_only=True)
    effective_price = serializers.SerializerMethodField()
    is_on_discount = serializers.SerializerMethodField()
    variations = serializers.SerializerMethodField()
    variation_groups = VariationGroupSerializer(many=True, read_only=True)
    add_ons = AddOnSerializer(many=True, read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            'id', 'merchant', 'category', 'category_name', 'name', 'description',
            'base_price', 'effective_price', 'is_on_discount', 'image_url', 'popular',
            'available', 'discount_price', 'discount_start_date', 'discount_end_date',
            'discount_active', 'track_inventory', 'stock_quantity', 'low_stock_threshold',
            'variations', 'variation_groups', 'add_ons', 'created_at', 'updated_at',
        ]

    def get_effective_price(self, obj):
        return str(effective_price(obj))

    def get_is_on_discount(self, obj):
        return is_discount_active(obj)

    def get_variations(self, obj):
        ungrouped = [variation for variation in obj.variations.all() if variation.group_id is None]
        return VariationSerializer(ungrouped, many=True).data


class MenuItemWriteSerializer(serializers.ModelSerializer):
    variations = VariationSerializer(many=True, required=False)
    variation_groups = VariationGroupSerializer(many=True, required=False)
    add_ons = AddOnSerializer(many=True, required=False)

    class Meta:
        model = MenuItem
        fields = [
            'id', 'merchant', 'category', 'name', 'description', 'base_price', 'image_url',
            'popular', 'available', 'discount_price', 'discount_start_date', 'discount_end_date',
            'discount_active', 'track_inventory', 'stock_quantity', 'low_stock_threshold',
            'variations', 'variation_groups', 'add_ons',
        ]

    def _current(self, attrs, field):
        if field in attrs:
            return attrs[field]
        return getattr(self.instance, field, None)

    def validate_base_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price cannot be negative.")
        return value

    def validate_stock_quantity(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Stock quantity cannot be negative.")
        return value

    def validate_low_stock_threshold(self, value):
        if value < 0:
            raise serializers.ValidationError("Low stock threshold cannot be negative.")
        return value

    def validate(self, attrs):
        merchant = self._current(attrs, 'merchant')
        category = self._current(attrs, 'category')
        if merchant and category and category.merchant_id != merchant.pk:
            raise serializers.ValidationError({'category': "Category belongs to a different merchant."})

        discount_price = self._current(attrs, 'discount_price')
        base_price = self._current(attrs, 'base_price')
        if discount_price is not None and base_price is not None and discount_price > base_price:
            raise serializers.ValidationError({'discount_price': "Discount price cannot exceed the base price."})

        start = self._current(attrs, 'discount_start_date')
        end = self._current(attrs, 'discount_end_date')
        if start and end and start > end:
            raise serializers.ValidationError({'discount_end_date': "Discount end must be after its start."})
        return attrs

    def _replace_options(self, item, variations, groups, add_ons):
        if groups is not None:
            item.variation_groups.all().delete()
            for group_data in groups:
                group_variations = group_data.pop('variations', [])
                group = VariationGroup.objects.create(menu_item=item, **group_data)
                for variation_data in group_variations:
                    Variation.objects.create(menu_item=item, group=group, **variation_data)

        if variations is not None:
            item.variations.filter(group__isnull=True).delete()
            for variation_data in variations:
                Variation.objects.create(menu_item=item, **variation_data)

        if add_ons is not None:
            item.add_ons.all().delete()
            for add_on_data in add_ons:
                AddOn.objects.create(menu_item=item, **add_on_data)

    @transaction.atomic
    def create(self, validated_data):
        variations = validated_data.pop('variations', [])
        groups = validated_data.pop('variation_groups', [])
        add_ons = validated_data.pop('add_ons', [])

        item = MenuItem.objects.create(**validated_data)
        self._replace_options(item, variations, groups, add_ons)
        return item

    @transaction.atomic
    def update(self, instance, validated_data):
        # Nested lists that are present replace the stored rows, omitted ones stay as they are
        variations = validated_data.pop('variations', None)
        groups = validated_data.pop('variation_groups', None)
        add_ons = validated_data.pop('add_ons', None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()

        self._replace_options(instance, variations, groups, add_ons)
        return instance

    def to_representation(self, instance):
        return MenuItemSerializer(instance, context=self.context).data


class MenuCategorySerializer(serializers.ModelSerializer):
    items = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ['id', 'name', 'icon', 'sort_order', 'items']

    def get_items(self, obj):
        return MenuItemSerializer(obj.items.all(), many=True, context=self.context).data


class StockAdjustSerializer(serializers.ModelSerializer):
    class Meta:
        model = MenuItem
        fields = ['id', 'name', 'track_inventory', 'stock_quantity', 'low_stock_threshold', 'available']
        read_only_fields = ['id', 'name', 'available']
        extra_kwargs = {
            'stock_quantity': {'min_value': 0},
            'low_stock_threshold': {'min_value': 0},
        }


class StockLineSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class DecrementStockSerializer(serializers.Serializer):
    items = StockLineSerializer(many=True, allow_empty=False)
