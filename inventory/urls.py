from django.urls import path

from . import views

urlpatterns = [
    # Category URLs
    path('categories/', views.CategoryListCreateView.as_view(), name='category-list-create'),
    path('categories/reorder/', views.reorder_categories, name='category-reorder'),
    path('categories/<uuid:pk>/', views.CategoryRetrieveUpdateDestroyView.as_view(), name='category-detail'),

    # Menu URLs
    path('merchants/<uuid:pk>/menu/', views.merchant_menu, name='merchant-menu'),
    path('menu-items/', views.MenuItemListCreateView.as_view(), name='menu-item-list-create'),
    path('menu-items/<uuid:pk>/', views.MenuItemRetrieveUpdateDestroyView.as_view(), name='menu-item-detail'),

    # Inventory
    path('menu-items/<uuid:pk>/stock/', views.adjust_stock, name='menu-item-stock'),
    path('inventory/decrement/', views.decrement_stock, name='inventory-decrement'),
    path('inventory/low-stock/', views.low_stock, name='inventory-low-stock'),
]
