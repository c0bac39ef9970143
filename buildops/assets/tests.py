"""
Test suite for Assets module
Tests: asset CRUD and maintenance logs
"""
from django.test import TestCase
from rest_framework import status
from buildops.core.models import ActivityLog
from buildops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from buildops.assets.models import Asset


class AssetAPITests(TestCase):
    """Test asset endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_asset(self):
        project = TestDataFactory.create_project()
        response = self.client.post('/api/v1/assets/', {
            'name': 'Excavator CAT 320',
            'category': 'Heavy Equipment',
            'status': 'In Use',
            'purchase_date': '2022-03-15',
            'purchase_cost': '180000.00',
            'current_project': project.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['current_project_name'], project.name)
        self.assertTrue(ActivityLog.objects.filter(type='ASSET_ADDED').exists())

    def test_negative_cost_is_rejected(self):
        response = self.client.post('/api/v1/assets/', {
            'name': 'Generator',
            'category': 'Power',
            'status': 'Available',
            'purchase_date': '2022-03-15',
            'purchase_cost': '-1.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('purchase_cost', response.data)

    def test_unknown_status_is_rejected(self):
        asset = TestDataFactory.create_asset()
        response = self.client.patch(f'/api/v1/assets/{asset.id}/', {'status': 'Lost'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_status_change_is_logged(self):
        asset = TestDataFactory.create_asset()
        response = self.client.patch(f'/api/v1/assets/{asset.id}/', {'status': 'Under Maintenance'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        entry = ActivityLog.objects.get(type='ASSET_UPDATED')
        self.assertEqual(entry.changes['status']['new'], 'Under Maintenance')

    def test_maintenance_log(self):
        asset = TestDataFactory.create_asset()
        response = self.client.post(f'/api/v1/assets/{asset.id}/maintenance/', {
            'date': '2024-01-10',
            'type': 'Service',
            'description': 'Replaced hydraulic filters.',
            'cost': '350.00',
            'completed_by': 'Plant Workshop',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get(f'/api/v1/assets/{asset.id}/maintenance/')
        self.assertEqual(len(response.data), 1)

    def test_maintenance_description_too_short(self):
        asset = TestDataFactory.create_asset()
        response = self.client.post(f'/api/v1/assets/{asset.id}/maintenance/', {
            'date': '2024-01-10',
            'type': 'Service',
            'description': 'Oil',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_asset(self):
        asset = TestDataFactory.create_asset()
        response = self.client.delete(f'/api/v1/assets/{asset.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Asset.objects.filter(pk=asset.pk).exists())
