import logging

from django.db import transaction
from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from authentication.permissions import IsStaffOrReadOnly, IsStaffUser, is_staff
from merchants.models import Merchant
from merchants.serializers import MerchantSerializer

from .models import Category, MenuItem, Variation
from .serializers import (
    CategoryReorderSerializer, CategorySerializer, DecrementStockSerializer,
    MenuCategorySerializer, MenuItemSerializer, MenuItemWriteSerializer, StockAdjustSerializer,
)
from .stock import decrement_menu_item_stock, low_stock_items

logger = logging.getLogger(__name__)

MENU_ITEM_PREFETCH = [
    'add_ons',
    'variations',
    Prefetch('variation_groups__variations', queryset=Variation.objects.order_by('sort_order', 'name')),
]


class MerchantScopedMixin:
    """Hide rows of inactive merchants from the public"""

    def get_queryset(self):
        queryset = super().get_queryset()
        if not is_staff(self.request.user):
            queryset = queryset.filter(merchant__active=True)
        return queryset


# Category Views
class CategoryListCreateView(MerchantScopedMixin, generics.ListCreateAPIView):
    """
    get: List categories, optionally for one merchant
    post: Create a category (staff only)
    """
    queryset = Category.objects.select_related('merchant')
    serializer_class = CategorySerializer
    permission_classes = [IsStaffOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['merchant', 'active']
    search_fields = ['name']
    ordering_fields = ['sort_order', 'name', 'created_at']
    ordering = ['sort_order', 'name']


class CategoryRetrieveUpdateDestroyView(MerchantScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    get: Category details
    put/patch: Update category (staff only)
    delete: Delete an empty category (staff only)
    """
    queryset = Category.objects.select_related('merchant')
    serializer_class = CategorySerializer
    permission_classes = [IsStaffOrReadOnly]

    def perform_destroy(self, instance):
        item_count = instance.items.count()
        if item_count:
            raise ValidationError(
                f"Cannot delete category {instance.name}: it still has {item_count} menu item(s)."
            )
        instance.delete()


@extend_schema(request=CategoryReorderSerializer, responses=CategorySerializer(many=True))
@api_view(['POST'])
@permission_classes([IsStaffUser])
def reorder_categories(request):
    """Persist a new category order; position n gets sort_order n + 1"""
    serializer = CategoryReorderSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    merchant = serializer.validated_data['merchant']
    with transaction.atomic():
        for index, category_id in enumerate(serializer.validated_data['category_ids']):
            Category.objects.filter(merchant=merchant, pk=category_id).update(sort_order=index + 1)

    categories = Category.objects.filter(merchant=merchant).order_by('sort_order', 'name')
    return Response(CategorySerializer(categories, many=True).data)


# Menu Item Views
class MenuItemListCreateView(MerchantScopedMixin, generics.ListCreateAPIView):
    """
    get: List menu items with filters and search
    post: Create a menu item with variations and add-ons (staff only)
    """
    queryset = MenuItem.objects.select_related('category', 'merchant').prefetch_related(*MENU_ITEM_PREFETCH)
    permission_classes = [IsStaffOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['merchant', 'category', 'available', 'popular', 'track_inventory']
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'base_price', 'created_at', 'stock_quantity']
    ordering = ['name']

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return MenuItemWriteSerializer
        return MenuItemSerializer


class MenuItemRetrieveUpdateDestroyView(MerchantScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    get: Menu item details
    put/patch: Update menu item; nested lists that are sent replace the stored ones (staff only)
    delete: Delete menu item (staff only)
    """
    queryset = MenuItem.objects.select_related('category', 'merchant').prefetch_related(*MENU_ITEM_PREFETCH)
    permission_classes = [IsStaffOrReadOnly]

    def get_serializer_class(self):
        if self.request.method in ['PUT', 'PATCH']:
            return MenuItemWriteSerializer
        return MenuItemSerializer


@api_view(['GET'])
@permission_classes([AllowAny])
def merchant_menu(request, pk):
    """Active categories of a merchant in display order, each with its items"""
    merchant = get_object_or_404(Merchant, pk=pk, active=True)
    items = MenuItem.objects.prefetch_related(*MENU_ITEM_PREFETCH).order_by('name')
    categories = (
        Category.objects.filter(merchant=merchant, active=True)
        .prefetch_related(Prefetch('items', queryset=items))
        .order_by('sort_order', 'name')
    )
    return Response({
        'merchant': MerchantSerializer(merchant).data,
        'categories': MenuCategorySerializer(categories, many=True, context={'request': request}).data,
    })


@extend_schema(request=StockAdjustSerializer, responses=StockAdjustSerializer)
@api_view(['PATCH'])
@permission_classes([IsStaffUser])
def adjust_stock(request, pk):
    """Set stock quantity, low stock threshold or tracking; availability follows"""
    item = get_object_or_404(MenuItem, pk=pk)
    serializer = StockAdjustSerializer(item, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    logger.info(
        "Stock adjusted for %s: tracked=%s quantity=%s threshold=%s",
        item.pk, item.track_inventory, item.stock_quantity, item.low_stock_threshold,
    )
    return Response(serializer.data)


@extend_schema(request=DecrementStockSerializer, responses=StockAdjustSerializer(many=True))
@api_view(['POST'])
@permission_classes([IsStaffUser])
def decrement_stock(request):
    """Subtract ordered quantities from tracked items in one locked transaction"""
    serializer = DecrementStockSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    updated = decrement_menu_item_stock(serializer.validated_data['items'])
    return Response({
        "detail": f"Updated stock for {len(updated)} menu item(s)",
        "items": StockAdjustSerializer(updated, many=True).data,
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsStaffUser])
def low_stock(request):
    merchant = None
    merchant_id = request.query_params.get('merchant')
    if merchant_id:
        merchant = get_object_or_404(Merchant, pk=merchant_id)
    items = low_stock_items(merchant)
    return Response(StockAdjustSerializer(items, many=True).data)
