from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Order, OrderItem


@receiver([post_save, post_delete], sender=OrderItem)
def update_order_totals_on_item_change(sender, instance, **kwargs):
    """Keep order totals in step when line snapshots are edited or removed"""
    try:
        order = Order.objects.get(pk=instance.order_id)
    except Order.DoesNotExist:
        # The order itself is being deleted
        return
    order.calculate_totals()
    order.save(update_fields=['subtotal', 'total', 'updated_at'])
