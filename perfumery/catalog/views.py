import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotAuthenticated
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from perfumery.core import permissions as policy
from perfumery.core.exceptions import PerfumeryError
from perfumery.core.utils import create_audit_log, describe_instance
from .filters import ComponentFilter, PerfumeFilter
from .models import Component, Perfume
from .serializers import ComponentSerializer, PerfumeSerializer

logger = logging.getLogger(__name__)


def _require_authenticated(request):
    if not request.user or not request.user.is_authenticated:
        raise NotAuthenticated()


def _list_create(request, model, serializer_class, filter_class):
    """List catalog items or create one owned by the caller"""
    if request.method == 'GET':
        queryset = model.objects.select_related('supplier').order_by('id')
        queryset = filter_class(request.query_params, queryset=queryset).qs
        serializer = serializer_class(queryset, many=True)
        return Response(serializer.data)

    # POST
    _require_authenticated(request)
    if not policy.user_can(request.user, policy.CREATE, policy.CATALOG):
        return Response({'error': 'Only suppliers and admins can create catalog items'}, status=status.HTTP_403_FORBIDDEN)

    data = request.data.copy()
    is_admin = policy.is_admin_user(request.user)
    if not is_admin:
        # Suppliers always own what they create
        data.pop('supplier_id', None)

    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    if is_admin:
        if serializer.validated_data.get('supplier') is None:
            return Response({'error': 'Supplier ID is required'}, status=status.HTTP_400_BAD_REQUEST)
        item = serializer.save()
    else:
        item = serializer.save(supplier=request.user)

    logger.info(f"{model.__name__} {item.id} created by user {request.user.id} for supplier {item.supplier_id}")
    create_audit_log(
        request=request,
        action='create',
        instance=item,
        changes={
            'name': item.name,
            'supplier_id': item.supplier_id,
            'available_quantity': item.available_quantity,
        }
    )
    return Response(serializer_class(item).data, status=status.HTTP_201_CREATED)


def _detail(request, pk, model, serializer_class):
    """Retrieve, update or delete a catalog item"""
    item = get_object_or_404(model.objects.select_related('supplier'), pk=pk)

    if request.method == 'GET':
        return Response(serializer_class(item).data)

    _require_authenticated(request)
    action = policy.DELETE if request.method == 'DELETE' else policy.UPDATE
    if not policy.user_can(request.user, action, policy.CATALOG, owner_id=item.supplier_id):
        logger.warning(f"User {request.user.id} denied {action} on {model.__name__} {item.id}")
        return Response({'error': 'You can only modify your own catalog items'}, status=status.HTTP_403_FORBIDDEN)

    if request.method in ('PUT', 'PATCH'):
        data = request.data.copy()
        if not policy.is_admin_user(request.user) or not data.get('supplier_id'):
            # Only admins reassign suppliers, and never to nobody
            data.pop('supplier_id', None)

        serializer = serializer_class(item, data=data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        changes = {
            key: str(value.pk if hasattr(value, 'pk') else value)
            for key, value in serializer.validated_data.items()
        }
        try:
            item = serializer.save()
        except PerfumeryError as e:
            return Response({'error': e.message}, status=e.status_code)

        create_audit_log(
            request=request,
            action='update',
            instance=item,
            changes=changes,
        )
        return Response(serializer_class(item).data)

    # DELETE
    model_name, item_id, item_name = describe_instance(item)
    item.delete()

    logger.info(f"{model_name} {item_id} deleted by user {request.user.id}")
    create_audit_log(
        request=request,
        action='delete',
        model_name=model_name,
        object_id=item_id,
        object_name=item_name,
    )
    return Response(status=status.HTTP_204_NO_CONTENT)


# Perfume views
@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def perfume_list_create(request):
    """Anonymous catalog listing; creation by suppliers and admins"""
    return _list_create(request, Perfume, PerfumeSerializer, PerfumeFilter)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([AllowAny])
def perfume_detail(request, pk):
    return _detail(request, pk, Perfume, PerfumeSerializer)


# Component views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def component_list_create(request):
    return _list_create(request, Component, ComponentSerializer, ComponentFilter)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def component_detail(request, pk):
    return _detail(request, pk, Component, ComponentSerializer)
