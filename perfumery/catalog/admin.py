from django.contrib import admin
from .models import Perfume, Component


@admin.register(Perfume)
class PerfumeAdmin(admin.ModelAdmin):
    list_display = ['name', 'price', 'available_quantity', 'supplier', 'updated_at']
    list_filter = ['supplier', 'created_at']
    search_fields = ['name', 'description', 'supplier__email']
    ordering = ['name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Component)
class ComponentAdmin(admin.ModelAdmin):
    list_display = ['name', 'price_per_unit', 'available_quantity', 'supplier', 'updated_at']
    list_filter = ['supplier', 'created_at']
    search_fields = ['name', 'description', 'supplier__email']
    ordering = ['name']
    readonly_fields = ['created_at', 'updated_at']
