from django.urls import path

from . import views

urlpatterns = [
    path('summary/', views.summary, name='dashboard-summary'),
    path('low-stock/', views.low_stock, name='dashboard-low-stock'),
    path('recent-orders/', views.recent_orders, name='dashboard-recent-orders'),
    path('export/', views.export_orders, name='dashboard-export'),
]
