"""
Test suite for Reports module
Tests: dashboard KPIs, inventory status report, project status report, approvals queue and cache invalidation
"""
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from buildops.core.cache_signals import invalidate_read_models
from buildops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from buildops.financials.services import record_transaction


class ReportsTests(TestCase):
    """Test report endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def tearDown(self):
        cache.clear()

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/reports/dashboard-kpis/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_dashboard_kpis(self):
        """Dashboard counts reflect projects, stock, requests and money"""
        project = TestDataFactory.create_project(status='In Progress')
        TestDataFactory.create_project(status='Planning')
        TestDataFactory.create_employee()
        TestDataFactory.create_item(quantity=50)
        TestDataFactory.create_item(quantity=4)
        TestDataFactory.create_item(quantity=0)
        TestDataFactory.create_material_request(project=project, quantity=2)
        TestDataFactory.create_purchase_order(project=project)
        account = TestDataFactory.create_account()
        record_transaction(description='Progress payment', amount=Decimal('5000.00'), type='Income', account=account)
        record_transaction(description='Cement', amount=Decimal('1200.00'), type='Expense', account=account)
        TestDataFactory.create_invoice(status='Sent')

        response = self.client.get('/api/v1/reports/dashboard-kpis/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['active_projects'], 1)
        self.assertEqual(data['total_projects'], 2)
        self.assertEqual(data['active_employees'], 1)
        self.assertEqual(data['low_stock_items'], 1)
        self.assertEqual(data['out_of_stock_items'], 1)
        self.assertEqual(data['pending_material_requests'], 1)
        self.assertEqual(data['pending_purchase_orders'], 1)
        self.assertEqual(Decimal(data['total_income']), Decimal('5000.00'))
        self.assertEqual(Decimal(data['total_expenses']), Decimal('1200.00'))
        self.assertEqual(Decimal(data['net_profit']), Decimal('3800.00'))
        self.assertEqual(data['outstanding_invoices'], 1)
        self.assertEqual(Decimal(data['outstanding_invoice_total']), Decimal('1000.00'))

    def test_dashboard_kpis_are_cached_until_invalidated(self):
        TestDataFactory.create_item(quantity=0)
        first = self.client.get('/api/v1/reports/dashboard-kpis/')
        self.assertEqual(first.data['out_of_stock_items'], 1)

        # on_commit hooks do not fire inside TestCase, so the cache still holds the old numbers
        TestDataFactory.create_item(quantity=0)
        cached = self.client.get('/api/v1/reports/dashboard-kpis/')
        self.assertEqual(cached.data['out_of_stock_items'], 1)

        invalidate_read_models()
        fresh = self.client.get('/api/v1/reports/dashboard-kpis/')
        self.assertEqual(fresh.data['out_of_stock_items'], 2)

    def test_inventory_status_report(self):
        """One row per stock status, in a fixed order, with zero rows kept"""
        TestDataFactory.create_item(quantity=30)
        TestDataFactory.create_item(quantity=12)
        TestDataFactory.create_item(quantity=7)

        response = self.client.get('/api/v1/reports/inventory-status/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = response.data['statuses']
        self.assertEqual([row['status'] for row in rows], ['In Stock', 'Low Stock', 'Out of Stock'])
        self.assertEqual(rows[0]['item_count'], 2)
        self.assertEqual(rows[0]['total_quantity'], 42)
        self.assertEqual(rows[1]['item_count'], 1)
        self.assertEqual(rows[1]['total_quantity'], 7)
        self.assertEqual(rows[2]['item_count'], 0)
        self.assertEqual(rows[2]['total_quantity'], 0)

    def test_project_status_report(self):
        TestDataFactory.create_project(status='Planning', budget=Decimal('1000.00'))
        TestDataFactory.create_project(status='Planning', budget=Decimal('2500.00'))
        TestDataFactory.create_project(status='Completed', budget=Decimal('900.00'))

        response = self.client.get('/api/v1/reports/project-status/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = {row['status']: row for row in response.data['statuses']}
        self.assertEqual(rows['Planning']['project_count'], 2)
        self.assertEqual(Decimal(rows['Planning']['total_budget']), Decimal('3500.00'))
        self.assertEqual(rows['Completed']['project_count'], 1)
        self.assertNotIn('On Hold', rows)

    def test_approvals_queue_lists_only_pending_items(self):
        project = TestDataFactory.create_project()
        pending_mr = TestDataFactory.create_material_request(project=project, quantity=3)
        TestDataFactory.create_material_request(project=project, quantity=1, status='Approved')
        pending_po = TestDataFactory.create_purchase_order(project=project)
        TestDataFactory.create_purchase_order(project=project, status='Ordered')

        response = self.client.get('/api/v1/approvals/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([mr['id'] for mr in response.data['material_requests']], [pending_mr.id])
        self.assertEqual([po['id'] for po in response.data['purchase_orders']], [pending_po.id])
        self.assertEqual(response.data['material_requests'][0]['project_name'], project.name)
