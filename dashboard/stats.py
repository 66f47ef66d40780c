from decimal import Decimal

from django.db.models import Count, Sum

from inventory.models import Category, MenuItem
from inventory.stock import low_stock_items
from merchants.models import Merchant
from orders.models import Order, OrderItem


def billable_orders(merchant=None):
    """Orders that count towards revenue"""
    orders = Order.objects.exclude(status='cancelled')
    if merchant is not None:
        orders = orders.filter(merchant=merchant)
    return orders


def get_catalog_counts(merchant=None):
    merchants = Merchant.objects.all()
    items = MenuItem.objects.all()
    categories = Category.objects.all()
    if merchant is not None:
        merchants = merchants.filter(pk=merchant.pk)
        items = items.filter(merchant=merchant)
        categories = categories.filter(merchant=merchant)

    return {
        'merchants': merchants.count(),
        'active_merchants': merchants.filter(active=True).count(),
        'menu_items': items.count(),
        'available_items': items.filter(available=True).count(),
        'unavailable_items': items.filter(available=False).count(),
        'categories': categories.count(),
        'low_stock_items': low_stock_items(merchant).count(),
    }


def get_today_stats(today, merchant=None):
    """Get today's key metrics"""
    today_orders = billable_orders(merchant).filter(created_at__date=today)

    today_revenue = today_orders.aggregate(total=Sum('total'))['total'] or Decimal('0.00')
    today_orders_count = today_orders.count()

    avg_order_value = today_revenue / today_orders_count if today_orders_count > 0 else Decimal('0.00')

    return {
        'revenue': today_revenue.quantize(Decimal('0.01')),
        'orders_count': today_orders_count,
        'avg_order_value': avg_order_value.quantize(Decimal('0.01')),
    }


def get_comparison_stats(today, yesterday, merchant=None):
    """Compare today vs yesterday"""
    orders = billable_orders(merchant)
    yesterday_orders = orders.filter(created_at__date=yesterday)
    today_orders = orders.filter(created_at__date=today)

    yesterday_revenue = yesterday_orders.aggregate(total=Sum('total'))['total'] or Decimal('0.00')
    today_revenue = today_orders.aggregate(total=Sum('total'))['total'] or Decimal('0.00')

    revenue_change = 0
    orders_change = 0

    if yesterday_revenue > 0:
        revenue_change = float(((today_revenue - yesterday_revenue) / yesterday_revenue) * 100)

    yesterday_count = yesterday_orders.count()
    today_count = today_orders.count()

    if yesterday_count > 0:
        orders_change = ((today_count - yesterday_count) / yesterday_count) * 100

    return {
        'revenue_change': round(revenue_change, 1),
        'orders_change': round(orders_change, 1),
    }


def get_order_status_breakdown(merchant=None, date=None):
    orders = Order.objects.all()
    if merchant is not None:
        orders = orders.filter(merchant=merchant)
    if date is not None:
        orders = orders.filter(created_at__date=date)
    return list(orders.values('status').annotate(count=Count('id')).order_by('-count'))


def get_top_selling_items(start_date, end_date, merchant=None, limit=10):
    """Top selling items in date range, by quantity"""
    items = OrderItem.objects.filter(
        order__created_at__date__gte=start_date,
        order__created_at__date__lte=end_date,
    ).exclude(order__status='cancelled')
    if merchant is not None:
        items = items.filter(order__merchant=merchant)

    return list(
        items.values('menu_item', 'name')
        .annotate(total_quantity=Sum('quantity'), total_revenue=Sum('subtotal'))
        .order_by('-total_quantity', 'name')[:limit]
    )


def get_recent_orders(merchant=None, limit=10):
    orders = Order.objects.select_related('merchant', 'payment_method').prefetch_related('items')
    if merchant is not None:
        orders = orders.filter(merchant=merchant)
    return orders.order_by('-created_at')[:limit]
