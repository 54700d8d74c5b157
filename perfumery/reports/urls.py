from django.urls import path
from . import views

urlpatterns = [
    path('dashboard/client/', views.dashboard_client, name='dashboard-client'),
    path('dashboard/supplier/', views.dashboard_supplier, name='dashboard-supplier'),
    path('dashboard/admin/', views.dashboard_admin, name='dashboard-admin'),
]
