"""
Test suite for Inventory module
Tests: derived stock status, material request approval, stock adjustments and the never-negative rule
"""
import random

from django.db import IntegrityError, transaction
from django.http import Http404
from django.test import TestCase
from rest_framework import status
from buildops.core.exceptions import ConflictError, DomainError
from buildops.core.models import ActivityLog
from buildops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from buildops.inventory.models import InventoryItem, MaterialRequest, derive_stock_status
from buildops.inventory import services


class StockStatusTests(TestCase):
    """Test the quantity -> status mapping and that saves keep it in sync"""

    def test_derive_stock_status_boundaries(self):
        self.assertEqual(derive_stock_status(11), 'In Stock')
        self.assertEqual(derive_stock_status(10), 'Low Stock')
        self.assertEqual(derive_stock_status(1), 'Low Stock')
        self.assertEqual(derive_stock_status(0), 'Out of Stock')
        self.assertEqual(derive_stock_status(-3), 'Out of Stock')

    def test_status_follows_quantity_on_save(self):
        item = TestDataFactory.create_item(quantity=50)
        self.assertEqual(item.status, 'In Stock')

        item.quantity = 4
        item.save(update_fields=['quantity'])
        item.refresh_from_db()
        self.assertEqual(item.status, 'Low Stock')

    def test_database_refuses_negative_quantity(self):
        item = TestDataFactory.create_item(quantity=2)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                InventoryItem.objects.filter(pk=item.pk).update(quantity=-1)


class MaterialRequestServiceTests(TestCase):
    """Test approval and rejection of material requests"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.project = TestDataFactory.create_project()

    def test_approve_draws_stock_and_updates_status(self):
        item = TestDataFactory.create_item(quantity=15)
        mr = TestDataFactory.create_material_request(project=self.project, item=item, quantity=8)

        services.approve_material_request(mr.id, user=self.user)

        item.refresh_from_db()
        mr.refresh_from_db()
        self.assertEqual(item.quantity, 7)
        self.assertEqual(item.status, 'Low Stock')
        self.assertEqual(mr.status, 'Approved')
        self.assertEqual(mr.actioned_by, self.user)
        self.assertIsNotNone(mr.actioned_at)
        self.assertTrue(ActivityLog.objects.filter(type='MATERIAL_REQUEST_APPROVED', object_id=str(mr.id)).exists())

    def test_approve_exact_quantity_leaves_item_out_of_stock(self):
        item = TestDataFactory.create_item(quantity=5)
        mr = TestDataFactory.create_material_request(project=self.project, item=item, quantity=5)

        services.approve_material_request(mr.id, user=self.user)

        item.refresh_from_db()
        self.assertEqual(item.quantity, 0)
        self.assertEqual(item.status, 'Out of Stock')

    def test_insufficient_stock_leaves_everything_untouched(self):
        item = TestDataFactory.create_item(name='Rebar 12mm', quantity=3)
        mr = TestDataFactory.create_material_request(project=self.project, item=item, quantity=5)

        with self.assertRaises(services.InsufficientStockError) as ctx:
            services.approve_material_request(mr.id, user=self.user)

        self.assertEqual(str(ctx.exception), 'Insufficient stock for Rebar 12mm. Required: 5, Available: 3.')
        item.refresh_from_db()
        mr.refresh_from_db()
        self.assertEqual(item.quantity, 3)
        self.assertEqual(item.status, 'Low Stock')
        self.assertEqual(mr.status, 'Pending')
        self.assertIsNone(mr.actioned_at)

    def test_request_cannot_be_actioned_twice(self):
        item = TestDataFactory.create_item(quantity=20)
        mr = TestDataFactory.create_material_request(project=self.project, item=item, quantity=5)
        services.approve_material_request(mr.id, user=self.user)

        with self.assertRaises(ConflictError):
            services.approve_material_request(mr.id, user=self.user)
        with self.assertRaises(ConflictError):
            services.reject_material_request(mr.id, user=self.user)

        item.refresh_from_db()
        self.assertEqual(item.quantity, 15)

    def test_reject_does_not_touch_stock(self):
        item = TestDataFactory.create_item(quantity=20)
        mr = TestDataFactory.create_material_request(project=self.project, item=item, quantity=5)

        services.reject_material_request(mr.id, user=self.user)

        item.refresh_from_db()
        mr.refresh_from_db()
        self.assertEqual(item.quantity, 20)
        self.assertEqual(mr.status, 'Rejected')

    def test_approve_with_deleted_item_is_refused(self):
        item = TestDataFactory.create_item(quantity=20)
        mr = TestDataFactory.create_material_request(project=self.project, item=item, quantity=5)
        item.delete()

        with self.assertRaises(DomainError):
            services.approve_material_request(mr.id, user=self.user)
        mr.refresh_from_db()
        self.assertEqual(mr.status, 'Pending')

    def test_missing_request_raises_not_found(self):
        mr = TestDataFactory.create_material_request(project=self.project, quantity=1)
        mr_id = mr.id
        mr.delete()

        with self.assertRaises(Http404):
            services.approve_material_request(mr_id, user=self.user)
        with self.assertRaises(Http404):
            services.reject_material_request(mr_id, user=self.user)

    def test_adjusting_missing_item_raises_not_found(self):
        with self.assertRaises(Http404):
            services.adjust_stock(999999, 5)


class StockAdjustmentServiceTests(TestCase):
    """Test manual stock adjustments"""

    def test_adjust_up_and_down(self):
        item = TestDataFactory.create_item(quantity=5)
        services.adjust_stock(item.id, 10)
        item.refresh_from_db()
        self.assertEqual(item.quantity, 15)
        self.assertEqual(item.status, 'In Stock')

        services.adjust_stock(item.id, -15)
        item.refresh_from_db()
        self.assertEqual(item.quantity, 0)
        self.assertEqual(item.status, 'Out of Stock')

    def test_adjust_below_zero_is_refused(self):
        item = TestDataFactory.create_item(quantity=5)
        with self.assertRaises(services.NegativeStockError):
            services.adjust_stock(item.id, -6)
        item.refresh_from_db()
        self.assertEqual(item.quantity, 5)

    def test_zero_and_non_integer_adjustments_are_refused(self):
        item = TestDataFactory.create_item(quantity=5)
        for delta in (0, 1.5, True):
            with self.assertRaises(DomainError):
                services.adjust_stock(item.id, delta)

    def test_adjustment_is_logged_with_signed_delta(self):
        item = TestDataFactory.create_item(name='Cement', quantity=5)
        services.adjust_stock(item.id, -2)
        entry = ActivityLog.objects.get(type='INVENTORY_ADJUSTED')
        self.assertEqual(entry.message, 'Stock for "Cement" adjusted by -2')


class StockInvariantTests(TestCase):
    """Random sequences of approvals and adjustments never break the stock rules"""

    def test_random_sequences_keep_stock_consistent(self):
        rng = random.Random(20240601)
        project = TestDataFactory.create_project()

        for _ in range(5):
            item = TestDataFactory.create_item(quantity=rng.randint(0, 30))
            for _ in range(40):
                if rng.random() < 0.5:
                    mr = TestDataFactory.create_material_request(
                        project=project, item=item, quantity=rng.randint(1, 15)
                    )
                    before = InventoryItem.objects.get(pk=item.pk).quantity
                    try:
                        services.approve_material_request(mr.id)
                    except services.InsufficientStockError:
                        self.assertGreater(mr.quantity, before)
                        self.assertEqual(MaterialRequest.objects.get(pk=mr.pk).status, 'Pending')
                        self.assertEqual(InventoryItem.objects.get(pk=item.pk).quantity, before)
                else:
                    delta = rng.choice([d for d in range(-12, 13) if d != 0])
                    try:
                        services.adjust_stock(item.id, delta)
                    except services.NegativeStockError:
                        pass

                current = InventoryItem.objects.get(pk=item.pk)
                self.assertGreaterEqual(current.quantity, 0)
                self.assertEqual(current.status, derive_stock_status(current.quantity))


class InventoryAPITests(TestCase):
    """Test inventory and material request endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.project = TestDataFactory.create_project()

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/inventory/items/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_item_derives_status(self):
        response = self.client.post('/api/v1/inventory/items/', {'name': 'Sand', 'quantity': 7}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Low Stock')

    def test_client_supplied_status_is_ignored(self):
        response = self.client.post(
            '/api/v1/inventory/items/', {'name': 'Gravel', 'quantity': 0, 'status': 'In Stock'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Out of Stock')

    def test_create_item_with_negative_quantity_fails(self):
        response = self.client.post('/api/v1/inventory/items/', {'name': 'Sand', 'quantity': -1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)

    def test_update_does_not_change_quantity(self):
        item = TestDataFactory.create_item(quantity=30)
        response = self.client.patch(
            f'/api/v1/inventory/items/{item.id}/', {'name': 'Renamed', 'quantity': 1}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        item.refresh_from_db()
        self.assertEqual(item.name, 'Renamed')
        self.assertEqual(item.quantity, 30)

    def test_filter_items_by_status(self):
        TestDataFactory.create_item(quantity=0)
        TestDataFactory.create_item(quantity=5)
        TestDataFactory.create_item(quantity=50)
        response = self.client.get('/api/v1/inventory/items/', {'status': 'Low Stock'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

        response = self.client.get('/api/v1/inventory/items/out-of-stock/')
        self.assertEqual(len(response.data), 1)

    def test_adjust_endpoint_refuses_negative_result(self):
        item = TestDataFactory.create_item(quantity=3)
        response = self.client.post(f'/api/v1/inventory/items/{item.id}/adjust/', {'quantity': -4}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Stock quantity cannot be negative.')

    def test_material_request_flow(self):
        item = TestDataFactory.create_item(quantity=12)
        response = self.client.post('/api/v1/material-requests/', {
            'project': self.project.id,
            'item': item.id,
            'quantity': 4,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Pending')
        self.assertEqual(response.data['item_name'], item.name)
        mr_id = response.data['id']

        response = self.client.post(f'/api/v1/material-requests/{mr_id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'Approved')
        item.refresh_from_db()
        self.assertEqual(item.quantity, 8)

        response = self.client.post(f'/api/v1/material-requests/{mr_id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'This request has already been actioned.')

    def test_material_request_for_unknown_item(self):
        response = self.client.post('/api/v1/material-requests/', {
            'project': self.project.id,
            'item': 99999,
            'quantity': 4,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('item', response.data)

    def test_approve_insufficient_returns_error(self):
        item = TestDataFactory.create_item(quantity=2)
        mr = TestDataFactory.create_material_request(project=self.project, item=item, quantity=3)
        response = self.client.post(f'/api/v1/material-requests/{mr.id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Insufficient stock', response.data['error'])

    def test_filter_material_requests_by_status(self):
        TestDataFactory.create_material_request(project=self.project, status='Pending')
        TestDataFactory.create_material_request(project=self.project, status='Rejected')
        response = self.client.get(f'/api/v1/material-requests/?status=Pending&project={self.project.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
