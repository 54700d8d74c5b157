import django_filters
from django.db.models import Q
from .models import Perfume, Component


class CatalogItemFilter(django_filters.FilterSet):
    """
    Query-string filters shared by the perfume and component listings:
    - search: name or description contains
    - supplier: supplier user id
    - in_stock: true -> available_quantity > 0, false -> sold out
    """
    search = django_filters.CharFilter(method='filter_search')
    supplier = django_filters.NumberFilter(field_name='supplier_id')
    in_stock = django_filters.BooleanFilter(method='filter_in_stock')

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))

    def filter_in_stock(self, queryset, name, value):
        if value:
            return queryset.filter(available_quantity__gt=0)
        return queryset.filter(available_quantity=0)


class PerfumeFilter(CatalogItemFilter):
    min_price = django_filters.NumberFilter(field_name='price', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='price', lookup_expr='lte')

    class Meta:
        model = Perfume
        fields = ['search', 'supplier', 'in_stock', 'min_price', 'max_price']


class ComponentFilter(CatalogItemFilter):
    min_price = django_filters.NumberFilter(field_name='price_per_unit', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='price_per_unit', lookup_expr='lte')

    class Meta:
        model = Component
        fields = ['search', 'supplier', 'in_stock', 'min_price', 'max_price']
