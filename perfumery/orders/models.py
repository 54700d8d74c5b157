from django.db import models
from django.utils import timezone
from decimal import Decimal
from perfumery.catalog.models import Perfume, Component
from perfumery.core.models import User


class Order(models.Model):
    """Client order, either of stock perfumes or a custom blend"""
    STATUS_PENDING = 'pending'
    STATUS_IN_PRODUCTION = 'in_production'
    STATUS_DELIVERED = 'delivered'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_IN_PRODUCTION, 'In Production'),
        (STATUS_DELIVERED, 'Delivered'),
    ]
    # Forward order of the lifecycle
    STATUS_SEQUENCE = [STATUS_PENDING, STATUS_IN_PRODUCTION, STATUS_DELIVERED]

    order_date = models.DateTimeField(default=timezone.now, db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    total_price = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    client = models.ForeignKey(User, on_delete=models.PROTECT, related_name='orders')
    is_custom_order = models.BooleanField(default=False)

    def __str__(self):
        return f"Order-{self.id}"

    def get_subtotal(self):
        """Sum of the captured line prices"""
        return sum((item.get_line_total() for item in self.items.all()), Decimal('0.00'))

    @classmethod
    def status_rank(cls, value):
        return cls.STATUS_SEQUENCE.index(value)

    class Meta:
        db_table = 'orders'
        ordering = ['-order_date', '-id']
        indexes = [
            models.Index(fields=['status'], name='idx_order_status'),
            models.Index(fields=['client', 'status'], name='idx_order_client_status'),
        ]


class OrderItem(models.Model):
    """Order line; unit_price is the perfume price at order time"""
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    perfume = models.ForeignKey(Perfume, on_delete=models.SET_NULL, null=True, blank=True, related_name='order_items')
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=18, decimal_places=2)

    def get_line_total(self):
        return self.unit_price * self.quantity

    class Meta:
        db_table = 'order_items'
        ordering = ['id']


class CustomPerfumeOrder(models.Model):
    """Custom blend details; priced later by a supplier"""
    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name='custom_order')
    price = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    notes = models.TextField(blank=True, default='')

    def __str__(self):
        return f"CustomOrder-{self.order_id}"

    class Meta:
        db_table = 'custom_perfume_orders'


class CustomPerfumeComponent(models.Model):
    custom_order = models.ForeignKey(CustomPerfumeOrder, on_delete=models.CASCADE, related_name='components')
    component = models.ForeignKey(Component, on_delete=models.SET_NULL, null=True, blank=True, related_name='custom_order_components')
    quantity = models.PositiveIntegerField()

    class Meta:
        db_table = 'custom_perfume_components'
        ordering = ['id']
