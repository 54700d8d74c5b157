from decimal import Decimal
from rest_framework import serializers
from .models import Order, OrderItem, CustomPerfumeOrder, CustomPerfumeComponent


# Input payloads

class OrderItemInputSerializer(serializers.Serializer):
    perfume_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)


class OrderCreateSerializer(serializers.Serializer):
    order_items = OrderItemInputSerializer(many=True, allow_empty=False)

    def get_lines(self):
        return [(item['perfume_id'], item['quantity']) for item in self.validated_data['order_items']]


class CustomComponentInputSerializer(serializers.Serializer):
    component_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)


class CustomOrderCreateSerializer(serializers.Serializer):
    components = CustomComponentInputSerializer(many=True, allow_empty=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def get_lines(self):
        return [(item['component_id'], item['quantity']) for item in self.validated_data['components']]


def _status_key(value):
    return str(value).replace('_', '').replace(' ', '').lower()


class OrderStatusUpdateSerializer(serializers.Serializer):
    """
    Accepts the status key ('in_production') or its label in any casing
    ('InProduction', 'In Production').
    """
    status = serializers.CharField()
    price = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, allow_null=True, min_value=Decimal('0.00'))

    def validate_status(self, value):
        lookup = {}
        for key, label in Order.STATUS_CHOICES:
            lookup[_status_key(key)] = key
            lookup[_status_key(label)] = key
        status = lookup.get(_status_key(value))
        if status is None:
            raise serializers.ValidationError(
                f"Invalid status '{value}'. Expected one of: {', '.join(k for k, _ in Order.STATUS_CHOICES)}"
            )
        return status


# Output representations

class OrderItemSerializer(serializers.ModelSerializer):
    perfume_id = serializers.IntegerField(read_only=True)
    perfume_name = serializers.SerializerMethodField()
    line_total = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = ['id', 'perfume_id', 'perfume_name', 'quantity', 'unit_price', 'line_total']

    def get_perfume_name(self, obj):
        # Perfume may have been removed from the catalog since
        return obj.perfume.name if obj.perfume else None

    def get_line_total(self, obj):
        return obj.get_line_total()


class OrderSerializer(serializers.ModelSerializer):
    client_id = serializers.IntegerField(read_only=True)
    client_name = serializers.SerializerMethodField()
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = ['id', 'order_date', 'status', 'status_display', 'total_price',
                  'client_id', 'client_name', 'is_custom_order', 'items']

    def get_client_name(self, obj):
        return obj.client.full_name or obj.client.email


class CustomPerfumeComponentSerializer(serializers.ModelSerializer):
    component_id = serializers.IntegerField(read_only=True)
    component_name = serializers.SerializerMethodField()
    price_per_unit = serializers.SerializerMethodField()

    class Meta:
        model = CustomPerfumeComponent
        fields = ['id', 'component_id', 'component_name', 'price_per_unit', 'quantity']

    def get_component_name(self, obj):
        return obj.component.name if obj.component else None

    def get_price_per_unit(self, obj):
        return obj.component.price_per_unit if obj.component else None


class CustomPerfumeOrderSerializer(serializers.ModelSerializer):
    order_id = serializers.IntegerField(read_only=True)
    order = OrderSerializer(read_only=True)
    components = CustomPerfumeComponentSerializer(many=True, read_only=True)

    class Meta:
        model = CustomPerfumeOrder
        fields = ['id', 'order_id', 'price', 'notes', 'order', 'components']
