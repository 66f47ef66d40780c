import logging

from django.db import transaction

from inventory.models import Category, MenuItem

from .models import Merchant

logger = logging.getLogger(__name__)

MERCHANT_COPY_EXCLUDE = {'id', 'created_at', 'updated_at'}


def _copy_fields(instance, exclude=MERCHANT_COPY_EXCLUDE):
    data = {}
    for field in instance._meta.concrete_fields:
        if field.name in exclude or field.primary_key:
            continue
        data[field.attname] = getattr(instance, field.attname)
    return data


@transaction.atomic
def duplicate_merchant(merchant):
    """
    Copy a merchant with its whole catalog.

    The copy is named "<name> (Copy)" and is never featured. Categories, menu
    items, variation groups, variations and add-ons are cloned and re-linked
    to the new rows.
    """
    data = _copy_fields(merchant)
    data.update(name=f"{merchant.name} (Copy)", featured=False)
    copy = Merchant.objects.create(**data)

    category_map = {}
    for category in Category.objects.filter(merchant=merchant):
        fields = _copy_fields(category, MERCHANT_COPY_EXCLUDE | {'merchant'})
        category_map[category.pk] = Category.objects.create(merchant=copy, **fields)

    items = MenuItem.objects.filter(merchant=merchant).prefetch_related(
        'variation_groups', 'variations', 'add_ons'
    )
    item_count = 0
    for item in items:
        fields = _copy_fields(item, MERCHANT_COPY_EXCLUDE | {'merchant', 'category'})
        new_item = MenuItem.objects.create(
            merchant=copy, category=category_map[item.category_id], **fields
        )

        group_map = {}
        for group in item.variation_groups.all():
            group_fields = _copy_fields(group, MERCHANT_COPY_EXCLUDE | {'menu_item'})
            group_map[group.pk] = new_item.variation_groups.create(**group_fields)

        for variation in item.variations.all():
            variation_fields = _copy_fields(variation, MERCHANT_COPY_EXCLUDE | {'menu_item', 'group'})
            new_item.variations.create(group=group_map.get(variation.group_id), **variation_fields)

        for add_on in item.add_ons.all():
            add_on_fields = _copy_fields(add_on, MERCHANT_COPY_EXCLUDE | {'menu_item'})
            new_item.add_ons.create(**add_on_fields)
        item_count += 1

    logger.info(
        "Duplicated merchant %s as %s (%s categories, %s items)",
        merchant.pk, copy.pk, len(category_map), item_count,
    )
    return copy
