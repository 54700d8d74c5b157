from django.contrib import admin
from .models import Order, OrderItem, CustomPerfumeOrder, CustomPerfumeComponent


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ['perfume', 'quantity', 'unit_price']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'client', 'order_date', 'status', 'is_custom_order', 'get_total']
    list_filter = ['status', 'is_custom_order', 'order_date']
    search_fields = ['client__email', 'client__full_name']
    ordering = ['-order_date']
    inlines = [OrderItemInline]

    def get_total(self, obj):
        return f"{obj.total_price:.2f}"
    get_total.short_description = 'Total'


class CustomPerfumeComponentInline(admin.TabularInline):
    model = CustomPerfumeComponent
    extra = 0
    fields = ['component', 'quantity']


@admin.register(CustomPerfumeOrder)
class CustomPerfumeOrderAdmin(admin.ModelAdmin):
    list_display = ['order', 'price', 'notes']
    search_fields = ['notes', 'order__client__email']
    inlines = [CustomPerfumeComponentInline]
