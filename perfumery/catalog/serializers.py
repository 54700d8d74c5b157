from django.db import DatabaseError, transaction
from rest_framework import serializers
from perfumery.core.exceptions import ConcurrencyConflict, NotFound
from perfumery.core.models import User
from .models import Perfume, Component


class CatalogItemSerializer(serializers.ModelSerializer):
    """
    Shared behaviour for perfumes and components.

    ``supplier_id`` is only honoured when the view lets it through (admins);
    suppliers are assigned by the view from the request user.
    """
    supplier_id = serializers.PrimaryKeyRelatedField(
        source='supplier',
        queryset=User.objects.filter(role=User.ROLE_SUPPLIER),
        required=False,
        allow_null=True,
    )
    supplier_name = serializers.SerializerMethodField()

    def get_supplier_name(self, obj):
        if obj.supplier is not None:
            return obj.supplier.full_name or obj.supplier.email
        return 'Unknown'

    def validate(self, attrs):
        if self.instance is None and not attrs.get('name'):
            raise serializers.ValidationError({'name': 'This field is required.'})
        return attrs

    def update(self, instance, validated_data):
        """
        Write only the changed columns. A row deleted after it was read makes
        the UPDATE touch nothing, which Django reports as a DatabaseError.
        """
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        update_fields = list(validated_data) + ['updated_at']
        try:
            # Own savepoint so the existence check below can still query
            with transaction.atomic():
                instance.save(update_fields=update_fields)
        except DatabaseError:
            model = instance.__class__
            if not model.objects.filter(pk=instance.pk).exists():
                raise NotFound(f'{model.__name__} not found')
            raise ConcurrencyConflict(f'{model.__name__} {instance.pk} was modified concurrently')
        return instance


class PerfumeSerializer(CatalogItemSerializer):
    class Meta:
        model = Perfume
        fields = ['id', 'name', 'description', 'price', 'available_quantity',
                  'supplier_id', 'supplier_name', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'name': {'required': False}}


class ComponentSerializer(CatalogItemSerializer):
    class Meta:
        model = Component
        fields = ['id', 'name', 'description', 'price_per_unit', 'available_quantity',
                  'supplier_id', 'supplier_name', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'name': {'required': False}}
