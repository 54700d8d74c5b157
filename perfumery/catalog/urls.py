from django.urls import path
from .views import (
    perfume_list_create, perfume_detail,
    component_list_create, component_detail
)

urlpatterns = [
    # Perfume endpoints (reads are public)
    path('perfumes/', perfume_list_create, name='perfume-list-create'),
    path('perfumes/<int:pk>/', perfume_detail, name='perfume-detail'),

    # Component endpoints
    path('components/', component_list_create, name='component-list-create'),
    path('components/<int:pk>/', component_detail, name='component-detail'),
]
