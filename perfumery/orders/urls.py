from django.urls import path
from .views import (
    order_list_create, order_detail, order_update_status,
    custom_order_create, custom_order_detail
)

urlpatterns = [
    # Order endpoints
    path('orders/', order_list_create, name='order-list-create'),
    path('orders/<int:pk>/', order_detail, name='order-detail'),
    path('orders/<int:pk>/status/', order_update_status, name='order-update-status'),

    # Custom blend endpoints
    path('orders/custom/', custom_order_create, name='custom-order-create'),
    path('orders/custom/<int:pk>/', custom_order_detail, name='custom-order-detail'),
]
