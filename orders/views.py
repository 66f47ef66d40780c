import logging

import django_filters
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, generics, status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from authentication.permissions import IsStaffUser

from .cart import Cart
from .models import Order
from .serializers import (
    AddToCartSerializer, CheckoutSerializer, OrderSerializer, OrderStatusSerializer,
    UpdateCartLineSerializer, cart_payload,
)
from .services import check_rate_limit, get_client_ip, place_orders

logger = logging.getLogger(__name__)


# Cart Views
@api_view(['GET', 'DELETE'])
@permission_classes([AllowAny])
def cart_detail(request):
    """
    get: Current cart with prices recomputed from the menu
    delete: Empty the cart
    """
    cart = Cart(request.session)
    if request.method == 'DELETE':
        cart.clear()
    return Response(cart_payload(cart))


@extend_schema(request=AddToCartSerializer)
@api_view(['POST'])
@permission_classes([AllowAny])
def cart_add_item(request):
    serializer = AddToCartSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    cart = Cart(request.session)
    cart.add(
        data['menu_item'],
        quantity=data['quantity'],
        variation=data.get('variation'),
        add_ons=data['add_ons'],
        selected_variations=data['selected_variations'],
    )
    return Response(cart_payload(cart), status=status.HTTP_201_CREATED)


@extend_schema(request=UpdateCartLineSerializer)
@api_view(['PATCH', 'DELETE'])
@permission_classes([AllowAny])
def cart_line(request, key):
    """
    patch: Change a line's quantity; zero or less removes it
    delete: Remove a line
    """
    cart = Cart(request.session)
    try:
        if request.method == 'DELETE':
            cart.remove(key)
        else:
            serializer = UpdateCartLineSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            cart.update_quantity(key, serializer.validated_data['quantity'])
    except KeyError:
        raise NotFound("Cart line not found.") from None
    return Response(cart_payload(cart))


# Checkout
@extend_schema(request=CheckoutSerializer, responses=OrderSerializer(many=True))
@api_view(['POST'])
@permission_classes([AllowAny])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def checkout(request):
    """Place one order per merchant in the cart"""
    serializer = CheckoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    ip_address = get_client_ip(request)
    check_rate_limit(ip_address)

    cart = Cart(request.session)
    orders = place_orders(cart, serializer.validated_data, ip_address=ip_address, request=request)
    return Response({
        "detail": f"{len(orders)} order(s) placed successfully",
        "orders": OrderSerializer(orders, many=True).data,
    }, status=status.HTTP_201_CREATED)


# Order review
class OrderFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = Order
        fields = ['merchant', 'status', 'service_type', 'payment_method']


class OrderListView(generics.ListAPIView):
    """
    get: Orders for the dashboard, newest first (staff only)
    """
    queryset = Order.objects.select_related('merchant', 'payment_method').prefetch_related('items')
    serializer_class = OrderSerializer
    permission_classes = [IsStaffUser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = OrderFilter
    search_fields = ['customer_name', 'contact_number', 'reference_number']
    ordering_fields = ['created_at', 'total', 'status']
    ordering = ['-created_at']


class OrderDetailView(generics.RetrieveUpdateAPIView):
    """
    get: Order with its line snapshots (staff only)
    patch: Update order status (staff only)
    """
    queryset = Order.objects.select_related('merchant', 'payment_method').prefetch_related('items')
    permission_classes = [IsStaffUser]
    http_method_names = ['get', 'patch', 'head', 'options']

    def get_serializer_class(self):
        if self.request.method == 'PATCH':
            return OrderStatusSerializer
        return OrderSerializer

    def perform_update(self, serializer):
        previous = serializer.instance.status
        order = serializer.save()
        logger.info("Order %s status changed from %s to %s", order.pk, previous, order.status)
