import django_filters
from django.db.models import Q
from .models import InventoryItem, MaterialRequest


class InventoryItemFilter(django_filters.FilterSet):
    """Filter inventory items by name, category, warehouse and derived status"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.NumberFilter(field_name='category_id', lookup_expr='exact')
    warehouse = django_filters.NumberFilter(field_name='warehouse_id', lookup_expr='exact')
    status = django_filters.ChoiceFilter(choices=InventoryItem.STATUS_CHOICES)

    class Meta:
        model = InventoryItem
        fields = ['search', 'category', 'warehouse', 'status']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(category__name__icontains=value) |
            Q(warehouse__name__icontains=value)
        )


class MaterialRequestFilter(django_filters.FilterSet):
    project = django_filters.NumberFilter(field_name='project_id', lookup_expr='exact')
    item = django_filters.NumberFilter(field_name='item_id', lookup_expr='exact')
    status = django_filters.ChoiceFilter(choices=MaterialRequest.STATUS_CHOICES)

    class Meta:
        model = MaterialRequest
        fields = ['project', 'item', 'status']
