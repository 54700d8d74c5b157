import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from perfumery.core.exceptions import PerfumeryError
from perfumery.core.permissions import IsClient, IsSupplierOrAdmin, scope_orders
from perfumery.core.utils import create_audit_log
from . import services
from .filters import OrderFilter
from .models import Order
from .serializers import (
    CustomOrderCreateSerializer, CustomPerfumeOrderSerializer, OrderCreateSerializer,
    OrderSerializer, OrderStatusUpdateSerializer
)

logger = logging.getLogger(__name__)


def _error_response(error):
    return Response({'error': error.message}, status=error.status_code)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def order_list_create(request):
    """List the orders visible to the caller or place a stock order (clients)"""
    if request.method == 'GET':
        queryset = scope_orders(Order.objects.all(), request.user)
        queryset = OrderFilter(request.query_params, queryset=queryset).qs
        queryset = queryset.select_related('client').prefetch_related('items__perfume')
        serializer = OrderSerializer(queryset, many=True)
        return Response(serializer.data)

    # POST
    if not IsClient().has_permission(request, None):
        return Response({'error': 'Only clients can place orders'}, status=status.HTTP_403_FORBIDDEN)

    serializer = OrderCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        order = services.create_standard_order(request.user, serializer.get_lines())
    except PerfumeryError as e:
        logger.warning(f"Order rejected for client {request.user.id}: {e.message}")
        return _error_response(e)

    order = services.get_order_for(request.user, order.id)
    create_audit_log(
        request=request,
        action='order_create',
        instance=order,
        changes={
            'total_price': str(order.total_price),
            'items': [
                {'perfume_id': item.perfume_id, 'quantity': item.quantity, 'unit_price': str(item.unit_price)}
                for item in order.items.all()
            ],
        }
    )
    return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def order_detail(request, pk):
    """Retrieve an order; 404 if missing, 403 if the caller may not see it"""
    try:
        order = services.get_order_for(request.user, pk)
    except PerfumeryError as e:
        return _error_response(e)
    return Response(OrderSerializer(order).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClient])
def custom_order_create(request):
    """Place a custom blend order"""
    serializer = CustomOrderCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        order = services.create_custom_order(
            request.user,
            serializer.get_lines(),
            notes=serializer.validated_data.get('notes', ''),
        )
    except PerfumeryError as e:
        logger.warning(f"Custom order rejected for client {request.user.id}: {e.message}")
        return _error_response(e)

    custom_order = services.get_custom_order_for(request.user, order.id)
    create_audit_log(
        request=request,
        action='custom_order_create',
        instance=order,
        changes={
            'notes': custom_order.notes,
            'components': [
                {'component_id': c.component_id, 'quantity': c.quantity}
                for c in custom_order.components.all()
            ],
        }
    )
    return Response(CustomPerfumeOrderSerializer(custom_order).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def custom_order_detail(request, pk):
    """Custom order details (components, notes, price) by order id"""
    try:
        custom_order = services.get_custom_order_for(request.user, pk)
    except PerfumeryError as e:
        return _error_response(e)
    return Response(CustomPerfumeOrderSerializer(custom_order).data)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsSupplierOrAdmin])
def order_update_status(request, pk):
    """Advance an order's status; optionally price a custom order"""
    serializer = OrderStatusUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    new_status = serializer.validated_data['status']
    price = serializer.validated_data.get('price')
    try:
        order = services.update_order_status(pk, request.user, new_status, price=price)
    except PerfumeryError as e:
        return _error_response(e)

    create_audit_log(
        request=request,
        action='order_status',
        instance=order,
        changes={
            'status': order.status,
            'price': str(price) if price is not None else None,
            'total_price': str(order.total_price),
        }
    )
    return Response(status=status.HTTP_204_NO_CONTENT)
