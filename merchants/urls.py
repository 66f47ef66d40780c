from django.urls import path

from . import views

urlpatterns = [
    # Merchant URLs
    path('merchants/', views.MerchantListCreateView.as_view(), name='merchant-list-create'),
    path('merchants/featured/', views.featured_merchants, name='merchant-featured'),
    path('merchants/<uuid:pk>/', views.MerchantRetrieveUpdateDestroyView.as_view(), name='merchant-detail'),
    path('merchants/<uuid:pk>/duplicate/', views.duplicate_merchant_view, name='merchant-duplicate'),
    path('merchants/<uuid:pk>/delivery-quote/', views.delivery_quote, name='merchant-delivery-quote'),
    path('merchants/<uuid:pk>/payment-methods/', views.merchant_payment_methods, name='merchant-payment-methods'),

    # Payment Method URLs
    path('payment-methods/', views.PaymentMethodListCreateView.as_view(), name='payment-method-list-create'),
    path('payment-methods/<uuid:pk>/', views.PaymentMethodRetrieveUpdateDestroyView.as_view(), name='payment-method-detail'),

    # Promotion URLs
    path('promotions/', views.PromotionListCreateView.as_view(), name='promotion-list-create'),
    path('promotions/<uuid:pk>/', views.PromotionRetrieveUpdateDestroyView.as_view(), name='promotion-detail'),

    # Uploads
    path('uploads/images/', views.upload_image, name='upload-image'),
]
