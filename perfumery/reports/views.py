import logging
from decimal import Decimal

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Sum
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from perfumery.catalog.models import Component, Perfume
from perfumery.catalog.serializers import ComponentSerializer, PerfumeSerializer
from perfumery.core.models import User
from perfumery.core.permissions import IsAdminRole, IsClient, IsSupplier
from perfumery.orders.models import CustomPerfumeOrder, Order, OrderItem
from perfumery.orders.serializers import CustomPerfumeOrderSerializer, OrderSerializer

logger = logging.getLogger('perfumery.reports')

LINE_TOTAL = ExpressionWrapper(
    F('unit_price') * F('quantity'),
    output_field=DecimalField(max_digits=18, decimal_places=2)
)


def _counts_by_status(orders):
    """Order counts keyed by status; every status is present"""
    counts = {key: 0 for key, _ in Order.STATUS_CHOICES}
    for row in orders.order_by().values('status').annotate(count=Count('id')):
        counts[row['status']] = row['count']
    return counts


def _order_queryset():
    return Order.objects.select_related('client').prefetch_related('items__perfume')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClient])
def dashboard_client(request):
    """Recent orders and status breakdown for the calling client"""
    orders = Order.objects.filter(client=request.user)
    recent = _order_queryset().filter(client=request.user)[:5]

    return Response({
        'recent_orders': OrderSerializer(recent, many=True).data,
        'total_orders': orders.count(),
        'orders_by_status': _counts_by_status(orders),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSupplier])
def dashboard_supplier(request):
    """Catalog and order overview for the calling supplier"""
    supplier = request.user

    perfumes = Perfume.objects.filter(supplier=supplier).select_related('supplier')
    components = Component.objects.filter(supplier=supplier).select_related('supplier')

    pending_orders = _order_queryset().filter(
        status=Order.STATUS_PENDING,
        is_custom_order=False,
        items__perfume__supplier=supplier
    ).distinct()

    custom_orders = CustomPerfumeOrder.objects.filter(
        components__component__supplier=supplier
    ).select_related('order__client').prefetch_related(
        'order__items__perfume', 'components__component'
    ).distinct().order_by('-order__order_date')

    revenue = OrderItem.objects.filter(
        perfume__supplier=supplier,
        order__status=Order.STATUS_DELIVERED
    ).aggregate(total=Sum(LINE_TOTAL))['total'] or Decimal('0.00')

    logger.info(f"Supplier dashboard for user {supplier.id}: {perfumes.count()} perfumes, revenue {revenue}")

    return Response({
        'perfumes': PerfumeSerializer(perfumes, many=True).data,
        'components': ComponentSerializer(components, many=True).data,
        'pending_orders': OrderSerializer(pending_orders, many=True).data,
        'custom_orders': CustomPerfumeOrderSerializer(custom_orders, many=True).data,
        'delivered_revenue': float(revenue),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def dashboard_admin(request):
    """System-wide counts and revenue"""
    users_by_role = {key: 0 for key, _ in User.ROLE_CHOICES}
    for row in User.objects.order_by().values('role').annotate(count=Count('id')):
        users_by_role[row['role']] = row['count']

    total_revenue = Order.objects.filter(
        status=Order.STATUS_DELIVERED
    ).aggregate(total=Sum('total_price'))['total'] or Decimal('0.00')

    recent = _order_queryset()[:10]

    return Response({
        'users_by_role': users_by_role,
        'total_users': sum(users_by_role.values()),
        'total_orders': Order.objects.count(),
        'orders_by_status': _counts_by_status(Order.objects.all()),
        'total_revenue': float(total_revenue),
        'recent_orders': OrderSerializer(recent, many=True).data,
    })
