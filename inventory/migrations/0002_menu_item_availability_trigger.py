from django.db import migrations

CREATE_STATEMENTS = [
    """
    CREATE OR REPLACE FUNCTION sync_menu_item_availability()
    RETURNS TRIGGER AS $$
    BEGIN
        IF NEW.track_inventory AND NEW.stock_quantity IS NOT NULL THEN
            NEW.available := NEW.stock_quantity > COALESCE(NEW.low_stock_threshold, 0);
        END IF;
        RETURN NEW;
    END;
    $$ LANGUAGE plpgsql
    """,
    "DROP TRIGGER IF EXISTS trg_sync_menu_item_availability ON menu_items",
    """
    CREATE TRIGGER trg_sync_menu_item_availability
    BEFORE INSERT OR UPDATE ON menu_items
    FOR EACH ROW EXECUTE FUNCTION sync_menu_item_availability()
    """,
    """
    UPDATE menu_items
    SET available = stock_quantity > COALESCE(low_stock_threshold, 0)
    WHERE track_inventory AND stock_quantity IS NOT NULL
    """,
]

DROP_STATEMENTS = [
    "DROP TRIGGER IF EXISTS trg_sync_menu_item_availability ON menu_items",
    "DROP FUNCTION IF EXISTS sync_menu_item_availability()",
]


def create_trigger(apps, schema_editor):
    # Other backends rely on MenuItem.save()
    if schema_editor.connection.vendor != 'postgresql':
        return
    for statement in CREATE_STATEMENTS:
        schema_editor.execute(statement)


def drop_trigger(apps, schema_editor):
    if schema_editor.connection.vendor != 'postgresql':
        return
    for statement in DROP_STATEMENTS:
        schema_editor.execute(statement)


class Migration(migrations.Migration):

    dependencies = [
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_trigger, drop_trigger),
    ]
