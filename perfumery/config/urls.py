from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Perfume Supply Admin Panel"
admin.site.site_title = "Perfume Supply Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('perfumery.core.urls')),
    path('api/', include('perfumery.catalog.urls')),
    path('api/', include('perfumery.orders.urls')),
    path('api/', include('perfumery.reports.urls')),
]
