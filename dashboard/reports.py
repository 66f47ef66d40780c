import csv
from decimal import Decimal

import openpyxl
from django.http import HttpResponse
from openpyxl.styles import Font

HEADERS = [
    'Date', 'Token', 'Order ID', 'Merchant', 'Customer', 'Contact', 'Service',
    'Items', 'Subtotal', 'Delivery Fee', 'Total', 'Payment Method', 'Status',
]


def order_rows(orders):
    for order in orders:
        items_str = ", ".join(f"{item.quantity}x {item.name}" for item in order.items.all())
        yield [
            order.created_at.strftime('%Y-%m-%d %H:%M'),
            order.token,
            str(order.id),
            order.merchant.name,
            order.customer_name,
            order.contact_number,
            order.get_service_type_display(),
            items_str,
            order.subtotal,
            order.delivery_fee,
            order.total,
            order.payment_label,
            order.get_status_display(),
        ]


def generate_orders_csv(orders, start_date, end_date):
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="orders_{start_date}_{end_date}.csv"'

    writer = csv.writer(response)
    writer.writerow(HEADERS)
    for row in order_rows(orders):
        writer.writerow(row)
    return response


def generate_orders_excel(orders, start_date, end_date):
    """Excel day book of orders in the period with a totals row"""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Orders"

    header_font = Font(bold=True, size=12)
    title_font = Font(bold=True, size=16)

    ws['A1'] = "ClickEats - Orders Report"
    ws['A1'].font = title_font
    ws['A2'] = f"Period: {start_date.strftime('%Y-%m-%d')} to {end_date.strftime('%Y-%m-%d')}"

    ws.merge_cells('A1:M1')
    ws.merge_cells('A2:M2')

    for col, header in enumerate(HEADERS, 1):
        cell = ws.cell(row=4, column=col, value=header)
        cell.font = header_font

    row = 5
    total_sales = Decimal('0.00')
    total_delivery = Decimal('0.00')
    for values in order_rows(orders):
        for col, value in enumerate(values, 1):
            ws.cell(row=row, column=col, value=float(value) if isinstance(value, Decimal) else value)
        total_delivery += values[9]
        total_sales += values[10]
        row += 1

    row += 1
    ws.cell(row=row, column=9, value="TOTALS:").font = header_font
    ws.cell(row=row, column=10, value=float(total_delivery)).font = header_font
    ws.cell(row=row, column=11, value=float(total_sales)).font = header_font

    # Auto-adjust column widths
    for column in ws.iter_cols(min_row=4):
        max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        ws.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)

    response = HttpResponse(content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
    response['Content-Disposition'] = f'attachment; filename="orders_{start_date}_{end_date}.xlsx"'

    wb.save(response)
    return response
