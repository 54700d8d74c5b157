"""
Order placement and fulfilment.

Every operation runs inside a single ``transaction.atomic()`` block. Catalog
rows whose stock is decremented are locked with ``select_for_update()`` (in
primary key order) before they are read, so concurrent orders for the same
item serialize on the row lock and cannot both drive stock below zero. Any
exception raised inside the block rolls back every write made by the call.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction

from perfumery.catalog.models import Component, Perfume
from perfumery.core import permissions as policy
from perfumery.core.exceptions import (
    CatalogItemNotFound, Forbidden, InsufficientStock, NotFound, ValidationError
)
from .models import CustomPerfumeComponent, CustomPerfumeOrder, Order, OrderItem

logger = logging.getLogger(__name__)


def _normalize_lines(lines, label):
    """Validate (id, quantity) pairs and return them as ints"""
    normalized = []
    for item_id, quantity in lines:
        try:
            item_id = int(item_id)
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise ValidationError(f'Invalid {label} line: ({item_id}, {quantity})')
        if quantity <= 0:
            raise ValidationError(f'Quantity for {label} {item_id} must be greater than 0')
        normalized.append((item_id, quantity))
    if not normalized:
        raise ValidationError(f'At least one {label} is required')
    return normalized


def _requested_totals(lines):
    """Total quantity per catalog id; repeated ids draw on the same stock"""
    totals = {}
    for item_id, quantity in lines:
        totals[item_id] = totals.get(item_id, 0) + quantity
    return totals


def _lock_and_check_stock(model, totals):
    """
    Lock the requested catalog rows and verify each has enough stock.
    Must be called inside an atomic block.
    """
    locked = {
        item.pk: item
        for item in model.objects.select_for_update().filter(pk__in=list(totals)).order_by('pk')
    }
    label = model.__name__.lower()
    for item_id, quantity in totals.items():
        item = locked.get(item_id)
        if item is None:
            raise CatalogItemNotFound(f'{model.__name__} with id {item_id} not found')
        if item.available_quantity < quantity:
            raise InsufficientStock(
                f'Not enough stock for {label} {item.name} '
                f'(requested {quantity}, available {item.available_quantity})'
            )
    return locked


def _decrement_stock(locked, totals):
    for item_id, quantity in totals.items():
        item = locked[item_id]
        item.available_quantity -= quantity
        item.save(update_fields=['available_quantity', 'updated_at'])


def _require_client(user):
    if not policy.user_can(user, policy.CREATE, policy.ORDER) or policy.get_role(user) != policy.ROLE_CLIENT:
        raise Forbidden('Only clients can place orders')


def create_standard_order(client, items):
    """
    Place an order for stock perfumes.

    Args:
        client: the ordering user (role Client)
        items: iterable of (perfume_id, quantity)

    Returns the persisted Order. Raises CatalogItemNotFound, InsufficientStock
    or ValidationError with nothing written.
    """
    _require_client(client)
    lines = _normalize_lines(items, 'perfume')
    totals = _requested_totals(lines)

    with transaction.atomic():
        perfumes = _lock_and_check_stock(Perfume, totals)

        order = Order.objects.create(
            client=client,
            status=Order.STATUS_PENDING,
            is_custom_order=False,
        )

        order_items = []
        for perfume_id, quantity in lines:
            perfume = perfumes[perfume_id]
            # Price is captured now; later catalog changes don't touch this order
            order_items.append(OrderItem(
                order=order,
                perfume=perfume,
                quantity=quantity,
                unit_price=perfume.price,
            ))
        OrderItem.objects.bulk_create(order_items)

        _decrement_stock(perfumes, totals)

        # Total is the sum of the persisted lines
        order.total_price = order.get_subtotal()
        order.save(update_fields=['total_price'])

    logger.info(
        f"Order {order.id} created for client {client.id}: "
        f"{len(lines)} line(s), total {order.total_price}"
    )
    return order


def create_custom_order(client, components, notes=''):
    """
    Place a custom blend order built from raw components.

    The order and its CustomPerfumeOrder are created together. Both prices
    start at 0 and are set later through ``update_order_status``.
    """
    _require_client(client)
    lines = _normalize_lines(components, 'component')
    totals = _requested_totals(lines)

    with transaction.atomic():
        locked = _lock_and_check_stock(Component, totals)

        order = Order.objects.create(
            client=client,
            status=Order.STATUS_PENDING,
            is_custom_order=True,
            total_price=Decimal('0.00'),
        )
        custom_order = CustomPerfumeOrder.objects.create(
            order=order,
            notes=notes or '',
            price=Decimal('0.00'),
        )
        CustomPerfumeComponent.objects.bulk_create([
            CustomPerfumeComponent(
                custom_order=custom_order,
                component=locked[component_id],
                quantity=quantity,
            )
            for component_id, quantity in lines
        ])

        _decrement_stock(locked, totals)

    logger.info(f"Custom order {order.id} created for client {client.id} with {len(lines)} component line(s)")
    return order


def _parse_price(price):
    if price is None:
        return None
    try:
        price = Decimal(str(price))
    except (InvalidOperation, ValueError):
        raise ValidationError(f'Invalid price: {price}')
    if not price.is_finite():
        raise ValidationError(f'Invalid price: {price}')
    if price < 0:
        raise ValidationError('Price must not be negative')
    return price


def update_order_status(order_id, caller, new_status, price=None):
    """
    Move an order to ``new_status``; for custom orders optionally set the price.

    Suppliers must own at least one product of the order and may only move
    the status forward. Admins may set any status.
    """
    role = policy.get_role(caller)
    if role not in (policy.ROLE_SUPPLIER, policy.ROLE_ADMIN):
        raise Forbidden('Only suppliers and admins can update order status')

    valid_statuses = [choice[0] for choice in Order.STATUS_CHOICES]
    if new_status not in valid_statuses:
        raise ValidationError(f"Invalid status '{new_status}'. Expected one of: {', '.join(valid_statuses)}")
    price = _parse_price(price)

    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None:
            raise NotFound(f'Order {order_id} not found')

        if not policy.is_allowed(role, caller.pk, policy.UPDATE_STATUS, policy.ORDER,
                                 owner_id=order.client_id,
                                 supplier_ids=policy.order_supplier_ids(order)):
            logger.warning(f"Supplier {caller.id} denied status update on order {order.id}")
            raise Forbidden('You can only update orders that contain your products')

        previous_status = order.status
        if role == policy.ROLE_SUPPLIER and Order.status_rank(new_status) < Order.status_rank(previous_status):
            raise ValidationError(f'Cannot move order {order.id} back from {previous_status} to {new_status}')

        order.status = new_status
        update_fields = ['status']

        if order.is_custom_order and price is not None:
            custom_order = CustomPerfumeOrder.objects.select_for_update().filter(order=order).first()
            if custom_order is not None:
                custom_order.price = price
                custom_order.save(update_fields=['price'])
                order.total_price = price
                update_fields.append('total_price')

        order.save(update_fields=update_fields)

    logger.info(f"Order {order.id} status {previous_status} -> {new_status} by user {caller.id}")
    return order


def get_order_for(user, order_id):
    """Load an order the user may read; NotFound / Forbidden otherwise"""
    order = (
        Order.objects
        .select_related('client', 'custom_order')
        .prefetch_related('items__perfume', 'custom_order__components__component')
        .filter(pk=order_id)
        .first()
    )
    if order is None:
        raise NotFound(f'Order {order_id} not found')
    if not policy.user_can(user, policy.READ, policy.ORDER,
                           owner_id=order.client_id,
                           supplier_ids=policy.order_supplier_ids(order)):
        raise Forbidden('You do not have access to this order')
    return order


def get_custom_order_for(user, order_id):
    """Load the custom part of an order the user may read"""
    order = get_order_for(user, order_id)
    custom_order = getattr(order, 'custom_order', None)
    if not order.is_custom_order or custom_order is None:
        raise NotFound(f'Custom order {order_id} not found')
    return custom_order
