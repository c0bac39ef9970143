"""
Test suite for Procurement module
Tests: purchase order creation, status transitions, ordering expense and receipt into stock
"""
from decimal import Decimal
from django.http import Http404
from django.test import TestCase
from rest_framework import status
from buildops.core.exceptions import DomainError, InvalidTransitionError
from buildops.core.models import ActivityLog
from buildops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from buildops.financials.models import Transaction
from buildops.procurement.models import PurchaseOrder
from buildops.procurement import services


class PurchaseOrderModelTests(TestCase):

    def test_total_cost_is_computed(self):
        po = TestDataFactory.create_purchase_order(quantity=4, unit_cost=Decimal('12.50'))
        self.assertEqual(po.total_cost, Decimal('50.00'))

    def test_transition_table(self):
        po = TestDataFactory.create_purchase_order()
        self.assertTrue(po.can_transition_to('Approved'))
        self.assertTrue(po.can_transition_to('Rejected'))
        self.assertFalse(po.can_transition_to('Ordered'))
        self.assertFalse(po.can_transition_to('Received'))

        po.status = 'Rejected'
        for target in ('Pending', 'Approved', 'Ordered', 'Received'):
            self.assertFalse(po.can_transition_to(target))


class PurchaseOrderServiceTests(TestCase):
    """Test the purchase order lifecycle"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.account = TestDataFactory.create_account(name='Main Account')
        self.item = TestDataFactory.create_item(quantity=3)
        self.po = TestDataFactory.create_purchase_order(item=self.item, quantity=20, unit_cost=Decimal('10.00'))

    def test_full_lifecycle(self):
        services.change_status(self.po.id, 'Approved', user=self.user)
        services.change_status(self.po.id, 'Ordered', user=self.user)

        expense = Transaction.objects.get(purchase_order=self.po)
        self.assertEqual(expense.type, 'Expense')
        self.assertEqual(expense.amount, Decimal('200.00'))
        self.assertEqual(expense.account, self.account)
        self.assertEqual(expense.description, f'Purchase Order for: {self.item.name}')
        self.assertEqual(expense.project_id, self.po.project_id)
        self.assertEqual(expense.supplier_id, self.po.supplier_id)

        services.change_status(self.po.id, 'Received', user=self.user)
        self.po.refresh_from_db()
        self.item.refresh_from_db()
        self.assertEqual(self.po.status, 'Received')
        self.assertEqual(self.item.quantity, 23)
        self.assertEqual(self.item.status, 'In Stock')
        self.assertTrue(ActivityLog.objects.filter(type='PO_RECEIVED').exists())

    def test_illegal_transition_changes_nothing(self):
        with self.assertRaises(InvalidTransitionError) as ctx:
            services.change_status(self.po.id, 'Ordered', user=self.user)
        self.assertEqual(str(ctx.exception), "Cannot change status from 'Pending' to 'Ordered'.")
        self.po.refresh_from_db()
        self.assertEqual(self.po.status, 'Pending')
        self.assertFalse(Transaction.objects.exists())

    def test_rejected_is_final(self):
        services.change_status(self.po.id, 'Rejected', user=self.user)
        with self.assertRaises(InvalidTransitionError):
            services.change_status(self.po.id, 'Approved', user=self.user)

    def test_ordering_without_account_is_refused(self):
        self.account.delete()
        services.change_status(self.po.id, 'Approved', user=self.user)
        with self.assertRaises(DomainError) as ctx:
            services.change_status(self.po.id, 'Ordered', user=self.user)
        self.assertEqual(str(ctx.exception), 'No financial account found. Please create an account first.')
        self.po.refresh_from_db()
        self.assertEqual(self.po.status, 'Approved')

    def test_receive_requires_ordered(self):
        services.change_status(self.po.id, 'Approved', user=self.user)
        with self.assertRaises(InvalidTransitionError):
            services.receive_purchase_order(self.po.id, user=self.user)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 3)

    def test_missing_order_raises_not_found(self):
        po_id = self.po.id
        self.po.delete()
        with self.assertRaises(Http404):
            services.change_status(po_id, 'Approved', user=self.user)
        with self.assertRaises(Http404):
            services.receive_purchase_order(po_id, user=self.user)


class PurchaseOrderAPITests(TestCase):
    """Test purchase order endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.account = TestDataFactory.create_account()
        self.supplier = TestDataFactory.create_supplier()
        self.project = TestDataFactory.create_project()
        self.item = TestDataFactory.create_item(name='Steel Beam', quantity=0)

    def _create_po(self):
        response = self.client.post('/api/v1/purchase-orders/', {
            'item': self.item.id,
            'quantity': 5,
            'unit_cost': '100.00',
            'supplier': self.supplier.id,
            'project': self.project.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data

    def test_create_purchase_order(self):
        data = self._create_po()
        self.assertEqual(data['status'], 'Pending')
        self.assertEqual(data['item_name'], 'Steel Beam')
        self.assertEqual(Decimal(data['total_cost']), Decimal('500.00'))
        self.assertTrue(ActivityLog.objects.filter(type='PO_CREATED', message='New PO created for Steel Beam').exists())

    def test_create_with_unknown_item(self):
        response = self.client.post('/api/v1/purchase-orders/', {
            'item': 424242,
            'quantity': 5,
            'unit_cost': '100.00',
            'supplier': self.supplier.id,
            'project': self.project.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['item'][0], 'Selected inventory item not found.')

    def test_status_walk_through_api(self):
        po_id = self._create_po()['id']
        for new_status in ('Approved', 'Ordered'):
            response = self.client.post(f'/api/v1/purchase-orders/{po_id}/status/', {'status': new_status}, format='json')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(response.data['status'], new_status)

        response = self.client.post(f'/api/v1/purchase-orders/{po_id}/receive/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 5)
        self.assertEqual(Transaction.objects.filter(purchase_order_id=po_id).count(), 1)

    def test_illegal_status_returns_error(self):
        po_id = self._create_po()['id']
        response = self.client.post(f'/api/v1/purchase-orders/{po_id}/status/', {'status': 'Received'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_only_pending_orders_can_be_edited(self):
        po_id = self._create_po()['id']
        self.client.post(f'/api/v1/purchase-orders/{po_id}/status/', {'status': 'Approved'}, format='json')
        response = self.client.patch(f'/api/v1/purchase-orders/{po_id}/', {'quantity': 9}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(PurchaseOrder.objects.get(pk=po_id).quantity, 5)

    def test_project_with_purchase_orders_cannot_be_deleted(self):
        self._create_po()
        response = self.client.delete(f'/api/v1/projects/{self.project.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cannot delete project. It has purchase orders.')

    def test_supplier_with_purchase_orders_cannot_be_deleted(self):
        self._create_po()
        response = self.client.delete(f'/api/v1/suppliers/{self.supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
