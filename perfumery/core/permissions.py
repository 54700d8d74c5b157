"""
Access policy shared by the catalog, order and dashboard endpoints.

Every role/ownership decision goes through ``is_allowed``. The DRF permission
classes below only gate endpoints by role; ownership is checked against the
resource once it has been loaded.
"""
from django.db.models import Q
from rest_framework.permissions import BasePermission

from .models import User

ROLE_CLIENT = User.ROLE_CLIENT
ROLE_SUPPLIER = User.ROLE_SUPPLIER
ROLE_ADMIN = User.ROLE_ADMIN

# Resources
CATALOG = 'catalog'
ORDER = 'order'

# Actions
READ = 'read'
CREATE = 'create'
UPDATE = 'update'
DELETE = 'delete'
UPDATE_STATUS = 'update_status'


def get_role(user):
    """
    Resolve the effective role of a user.
    Returns None for anonymous users. Superusers are always Admin.
    """
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    if user.is_superuser:
        return ROLE_ADMIN
    return user.role


def is_admin_user(user):
    return get_role(user) == ROLE_ADMIN


def is_allowed(role, caller_id, action, resource, owner_id=None, supplier_ids=()):
    """
    Decide whether a caller may perform ``action`` on a resource.

    Args:
        role: caller role (Client, Supplier, Admin) or None when anonymous
        caller_id: caller user id or None when anonymous
        action: one of read, create, update, delete, update_status
        resource: 'catalog' (perfume/component) or 'order'
        owner_id: supplier id for catalog items, client id for orders
        supplier_ids: ids of the suppliers whose products appear in an order
    """
    if role == ROLE_ADMIN:
        return True

    if resource == CATALOG:
        if action == READ:
            return True
        if action == CREATE:
            return role == ROLE_SUPPLIER
        if action in (UPDATE, DELETE):
            return role == ROLE_SUPPLIER and owner_id is not None and owner_id == caller_id
        return False

    if resource == ORDER:
        if action == CREATE:
            return role == ROLE_CLIENT
        if action == READ:
            if role == ROLE_CLIENT:
                return owner_id is not None and owner_id == caller_id
            if role == ROLE_SUPPLIER:
                return caller_id in set(supplier_ids)
            return False
        if action == UPDATE_STATUS:
            return role == ROLE_SUPPLIER and caller_id in set(supplier_ids)
        return False

    return False


def user_can(user, action, resource, owner_id=None, supplier_ids=()):
    """Apply ``is_allowed`` to a request user"""
    caller_id = user.pk if getattr(user, 'is_authenticated', False) else None
    return is_allowed(get_role(user), caller_id, action, resource, owner_id=owner_id, supplier_ids=supplier_ids)


def order_supplier_ids(order):
    """
    Suppliers owning at least one product of an order.
    Standard orders are owned through their perfumes, custom orders through
    their components.
    """
    supplier_ids = set()
    for item in order.items.all():
        if item.perfume is not None and item.perfume.supplier_id is not None:
            supplier_ids.add(item.perfume.supplier_id)
    if order.is_custom_order:
        custom_order = getattr(order, 'custom_order', None)
        if custom_order is not None:
            for custom_component in custom_order.components.all():
                component = custom_component.component
                if component is not None and component.supplier_id is not None:
                    supplier_ids.add(component.supplier_id)
    return supplier_ids


def scope_orders(queryset, user):
    """Restrict an Order queryset to what the user may read"""
    role = get_role(user)
    if role == ROLE_ADMIN:
        return queryset
    if role == ROLE_SUPPLIER:
        return queryset.filter(
            Q(items__perfume__supplier=user) |
            Q(custom_order__components__component__supplier=user)
        ).distinct()
    if role == ROLE_CLIENT:
        return queryset.filter(client=user)
    return queryset.none()


class HasRole(BasePermission):
    """Allow authenticated users whose role is in ``allowed_roles``"""
    allowed_roles = ()
    message = 'You do not have the role required for this action.'

    def has_permission(self, request, view):
        return get_role(request.user) in self.allowed_roles


class IsClient(HasRole):
    allowed_roles = (ROLE_CLIENT,)


class IsSupplier(HasRole):
    allowed_roles = (ROLE_SUPPLIER,)


class IsSupplierOrAdmin(HasRole):
    allowed_roles = (ROLE_SUPPLIER, ROLE_ADMIN)


class IsAdminRole(HasRole):
    allowed_roles = (ROLE_ADMIN,)
