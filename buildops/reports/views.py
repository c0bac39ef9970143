import logging
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Sum, Count
from decimal import Decimal

from buildops.core.cache_utils import (
    cached_query, DASHBOARD_KPI_CACHE_TTL, REPORTS_CACHE_TTL,
    DASHBOARD_CACHE_PREFIX, REPORTS_CACHE_PREFIX
)
from buildops.financials.services import summarize
from buildops.hr.models import Employee
from buildops.inventory.models import InventoryItem, MaterialRequest, IN_STOCK, LOW_STOCK, OUT_OF_STOCK
from buildops.inventory.serializers import MaterialRequestSerializer
from buildops.invoicing.models import Invoice
from buildops.procurement.models import PurchaseOrder
from buildops.procurement.serializers import PurchaseOrderSerializer
from buildops.projects.models import Project

logger = logging.getLogger(__name__)

OUTSTANDING_INVOICE_STATUSES = ('Draft', 'Sent')


@cached_query(cache_ttl=DASHBOARD_KPI_CACHE_TTL, key_prefix=DASHBOARD_CACHE_PREFIX)
def get_dashboard_kpis():
    """Headline numbers for the dashboard"""
    stock_counts = {
        row['status']: row['count']
        for row in InventoryItem.objects.values('status').annotate(count=Count('id'))
    }
    totals = summarize()
    outstanding = Invoice.objects.filter(status__in=OUTSTANDING_INVOICE_STATUSES).aggregate(
        count=Count('id'), total=Sum('total_amount')
    )
    return {
        'active_projects': Project.objects.filter(status='In Progress').count(),
        'total_projects': Project.objects.count(),
        'active_employees': Employee.objects.filter(status='Active').count(),
        'low_stock_items': stock_counts.get(LOW_STOCK, 0),
        'out_of_stock_items': stock_counts.get(OUT_OF_STOCK, 0),
        'pending_material_requests': MaterialRequest.objects.filter(status='Pending').count(),
        'pending_purchase_orders': PurchaseOrder.objects.filter(status='Pending').count(),
        'total_income': totals['income'],
        'total_expenses': totals['expenses'],
        'net_profit': totals['net'],
        'outstanding_invoices': outstanding['count'],
        'outstanding_invoice_total': outstanding['total'] or Decimal('0.00'),
    }


@cached_query(cache_ttl=REPORTS_CACHE_TTL, key_prefix=f'{REPORTS_CACHE_PREFIX}:inventory_status')
def get_inventory_status_report():
    """Item count and total quantity per stock status"""
    rows = {
        row['status']: row
        for row in InventoryItem.objects.values('status').annotate(
            item_count=Count('id'), total_quantity=Sum('quantity')
        )
    }
    report = []
    for stock_status in (IN_STOCK, LOW_STOCK, OUT_OF_STOCK):
        row = rows.get(stock_status, {})
        report.append({
            'status': stock_status,
            'item_count': row.get('item_count', 0),
            'total_quantity': row.get('total_quantity') or 0,
        })
    return report


@cached_query(cache_ttl=REPORTS_CACHE_TTL, key_prefix=f'{REPORTS_CACHE_PREFIX}:project_status')
def get_project_status_report():
    """Project count and budget per project status"""
    rows = Project.objects.values('status').annotate(
        project_count=Count('id'), total_budget=Sum('budget')
    ).order_by('status')
    return [
        {
            'status': row['status'],
            'project_count': row['project_count'],
            'total_budget': row['total_budget'] or Decimal('0.00'),
        }
        for row in rows
    ]


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_kpis(request):
    """Dashboard KPIs (cached, invalidated on writes to the underlying tables)"""
    logger.debug(f"User {request.user.username} requested dashboard KPIs")
    return Response(get_dashboard_kpis())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_status_report(request):
    return Response({'statuses': get_inventory_status_report()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def project_status_report(request):
    return Response({'statuses': get_project_status_report()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def approvals_queue(request):
    """Pending material requests and purchase orders awaiting a decision, oldest first"""
    material_requests = MaterialRequest.objects.filter(status='Pending').select_related(
        'project', 'requested_by', 'actioned_by'
    ).order_by('requested_at', 'id')
    purchase_orders = PurchaseOrder.objects.filter(status='Pending').select_related(
        'supplier', 'project'
    ).order_by('created_at', 'id')
    return Response({
        'material_requests': MaterialRequestSerializer(material_requests, many=True).data,
        'purchase_orders': PurchaseOrderSerializer(purchase_orders, many=True).data,
    })
