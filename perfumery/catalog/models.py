from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
from perfumery.core.models import User


class Perfume(models.Model):
    """Finished perfume offered by a supplier"""
    name = models.CharField(max_length=200, db_index=True)
    description = models.TextField(blank=True, default='')
    price = models.DecimalField(max_digits=18, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])
    available_quantity = models.PositiveIntegerField(default=0)
    supplier = models.ForeignKey(User, on_delete=models.PROTECT, null=True, related_name='supplied_perfumes')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'perfumes'
        ordering = ['id']
        indexes = [
            models.Index(fields=['name', 'supplier'], name='idx_perfume_name_supplier'),
        ]


class Component(models.Model):
    """Raw component used to blend custom perfumes"""
    name = models.CharField(max_length=200, db_index=True)
    description = models.TextField(blank=True, default='')
    price_per_unit = models.DecimalField(max_digits=18, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])
    available_quantity = models.PositiveIntegerField(default=0)
    supplier = models.ForeignKey(User, on_delete=models.PROTECT, null=True, related_name='supplied_components')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'components'
        ordering = ['id']
        indexes = [
            models.Index(fields=['name', 'supplier'], name='idx_component_name_supplier'),
        ]
