from datetime import timedelta

from django.shortcuts import get_object_or_404
from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from authentication.permissions import IsStaffUser
from inventory.serializers import StockAdjustSerializer
from inventory.stock import low_stock_items
from merchants.models import Merchant
from orders.models import Order
from orders.serializers import OrderSerializer

from .reports import generate_orders_csv, generate_orders_excel
from .stats import (
    get_catalog_counts, get_comparison_stats, get_order_status_breakdown,
    get_recent_orders, get_today_stats, get_top_selling_items,
)

MERCHANT_PARAM = OpenApiParameter('merchant', str, description='Limit to one merchant id')


class ExportQuerySerializer(serializers.Serializer):
    FILE_TYPE_CHOICES = [('csv', 'CSV'), ('excel', 'Excel')]

    start_date = serializers.DateField()
    end_date = serializers.DateField()
    file_type = serializers.ChoiceField(choices=FILE_TYPE_CHOICES, default='excel')
    merchant = serializers.PrimaryKeyRelatedField(queryset=Merchant.objects.all(), required=False)

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError({'end_date': "End date must be on or after the start date."})
        return attrs


def _merchant_from_query(request):
    merchant_id = request.query_params.get('merchant')
    if not merchant_id:
        return None
    return get_object_or_404(Merchant, pk=merchant_id)


@extend_schema(parameters=[MERCHANT_PARAM])
@api_view(['GET'])
@permission_classes([IsStaffUser])
def summary(request):
    """Catalog counts, today's sales, pending orders and best sellers"""
    merchant = _merchant_from_query(request)
    today = timezone.localdate()
    yesterday = today - timedelta(days=1)

    pending = Order.objects.filter(status='pending')
    if merchant is not None:
        pending = pending.filter(merchant=merchant)

    return Response({
        'catalog': get_catalog_counts(merchant),
        'today': get_today_stats(today, merchant),
        'comparison': get_comparison_stats(today, yesterday, merchant),
        'pending_orders': pending.count(),
        'status_breakdown': get_order_status_breakdown(merchant),
        'top_selling_items': get_top_selling_items(today - timedelta(days=30), today, merchant),
        'last_updated': timezone.localtime().strftime('%H:%M'),
    })


@extend_schema(parameters=[MERCHANT_PARAM])
@api_view(['GET'])
@permission_classes([IsStaffUser])
def low_stock(request):
    items = low_stock_items(_merchant_from_query(request))
    return Response(StockAdjustSerializer(items, many=True).data)


@extend_schema(parameters=[MERCHANT_PARAM])
@api_view(['GET'])
@permission_classes([IsStaffUser])
def recent_orders(request):
    orders = get_recent_orders(_merchant_from_query(request))
    return Response(OrderSerializer(orders, many=True).data)


@extend_schema(parameters=[ExportQuerySerializer])
@api_view(['GET'])
@permission_classes([IsStaffUser])
def export_orders(request):
    """Download orders of a date range as CSV or an Excel workbook"""
    query = ExportQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    params = query.validated_data

    orders = Order.objects.filter(
        created_at__date__gte=params['start_date'],
        created_at__date__lte=params['end_date'],
    ).select_related('merchant', 'payment_method').prefetch_related('items').order_by('created_at')
    if params.get('merchant') is not None:
        orders = orders.filter(merchant=params['merchant'])

    if params['file_type'] == 'csv':
        return generate_orders_csv(orders, params['start_date'], params['end_date'])
    return generate_orders_excel(orders, params['start_date'], params['end_date'])
