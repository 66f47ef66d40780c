from django.urls import path

from . import views

urlpatterns = [
    # Cart
    path('cart/', views.cart_detail, name='cart-detail'),
    path('cart/items/', views.cart_add_item, name='cart-add-item'),
    path('cart/items/<str:key>/', views.cart_line, name='cart-line'),

    # Checkout
    path('checkout/', views.checkout, name='checkout'),

    # Orders
    path('orders/', views.OrderListView.as_view(), name='order-list'),
    path('orders/<uuid:pk>/', views.OrderDetailView.as_view(), name='order-detail'),
]
