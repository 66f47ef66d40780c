from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, generics, status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from authentication.permissions import IsStaffOrReadOnly, IsStaffUser, is_staff
from clickeats.uploads import ImageUploadSerializer, store_image

from .delivery import quote_delivery
from .models import Merchant, PaymentMethod, Promotion
from .serializers import (
    DeliveryQuoteRequestSerializer, DeliveryQuoteSerializer, MerchantListSerializer,
    MerchantSerializer, PaymentMethodSerializer, PromotionSerializer,
)
from .services import duplicate_merchant


class StaffVisibilityMixin:
    """Public callers only see active rows; staff see everything"""
    active_field = 'active'

    def get_queryset(self):
        queryset = super().get_queryset()
        if is_staff(self.request.user):
            return queryset
        return queryset.filter(**{self.active_field: True})


# Merchant Views
class MerchantListCreateView(StaffVisibilityMixin, generics.ListCreateAPIView):
    """
    get: List merchants, featured first then by name
    post: Create a merchant (staff only)
    """
    queryset = Merchant.objects.all()
    permission_classes = [IsStaffOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category', 'featured', 'active']
    search_fields = ['name', 'description', 'cuisine_type']
    ordering_fields = ['name', 'rating', 'created_at']
    ordering = ['-featured', 'name']

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return MerchantSerializer
        return MerchantListSerializer


class MerchantRetrieveUpdateDestroyView(StaffVisibilityMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    get: Merchant details
    put/patch: Update merchant (staff only)
    delete: Delete merchant with its catalog (staff only)
    """
    queryset = Merchant.objects.all()
    serializer_class = MerchantSerializer
    permission_classes = [IsStaffOrReadOnly]


@api_view(['GET'])
@permission_classes([AllowAny])
def featured_merchants(request):
    merchants = Merchant.objects.filter(active=True, featured=True).order_by('name')
    return Response(MerchantListSerializer(merchants, many=True).data)


@extend_schema(request=None, responses=MerchantSerializer)
@api_view(['POST'])
@permission_classes([IsStaffUser])
def duplicate_merchant_view(request, pk):
    """Duplicate a merchant together with its categories and menu"""
    merchant = get_object_or_404(Merchant, pk=pk)
    copy = duplicate_merchant(merchant)
    return Response({
        "detail": "Merchant duplicated successfully",
        "merchant": MerchantSerializer(copy).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(request=DeliveryQuoteRequestSerializer, responses=DeliveryQuoteSerializer)
@api_view(['POST'])
@permission_classes([AllowAny])
def delivery_quote(request, pk):
    merchant = get_object_or_404(Merchant, pk=pk, active=True)
    serializer = DeliveryQuoteRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    quote = quote_delivery(
        merchant,
        serializer.validated_data['latitude'],
        serializer.validated_data['longitude'],
    )
    return Response(DeliveryQuoteSerializer(quote).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def merchant_payment_methods(request, pk):
    """Active payment methods owned by the merchant or shared by all merchants"""
    merchant = get_object_or_404(Merchant, pk=pk, active=True)
    methods = PaymentMethod.available_for(merchant)
    return Response(PaymentMethodSerializer(methods, many=True).data)


# Payment Method Views
class PaymentMethodListCreateView(generics.ListCreateAPIView):
    """
    get: List every payment method (staff only)
    post: Create a payment method (staff only)
    """
    queryset = PaymentMethod.objects.select_related('merchant')
    serializer_class = PaymentMethodSerializer
    permission_classes = [IsStaffUser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['merchant', 'active']
    search_fields = ['name', 'account_name']
    ordering_fields = ['sort_order', 'name', 'created_at']
    ordering = ['sort_order', 'name']


class PaymentMethodRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    queryset = PaymentMethod.objects.select_related('merchant')
    serializer_class = PaymentMethodSerializer
    permission_classes = [IsStaffUser]


# Promotion Views
class PromotionListCreateView(StaffVisibilityMixin, generics.ListCreateAPIView):
    """
    get: Carousel promotions, active only for the public
    post: Create a promotion (staff only)
    """
    queryset = Promotion.objects.all()
    serializer_class = PromotionSerializer
    permission_classes = [IsStaffOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['active']
    ordering_fields = ['sort_order', 'created_at']
    ordering = ['sort_order', '-created_at']


class PromotionRetrieveUpdateDestroyView(StaffVisibilityMixin, generics.RetrieveUpdateDestroyAPIView):
    queryset = Promotion.objects.all()
    serializer_class = PromotionSerializer
    permission_classes = [IsStaffOrReadOnly]


@extend_schema(request=ImageUploadSerializer)
@api_view(['POST'])
@permission_classes([IsStaffUser])
@parser_classes([MultiPartParser, FormParser])
def upload_image(request):
    """Store a logo, cover, banner or product photo and return its URL"""
    serializer = ImageUploadSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    url = store_image(
        serializer.validated_data['image'], serializer.validated_data['folder'], request=request,
    )
    return Response({'url': url}, status=status.HTTP_201_CREATED)
