"""
Test suite for Parties module
Tests: clients, interactions, contracts, suppliers, evaluations and AI summaries
"""
from unittest import mock
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from buildops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from buildops.parties.models import Client, Supplier


class ClientAPITests(TestCase):
    """Test client endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_client_defaults_to_lead(self):
        response = self.client.post('/api/v1/clients/', {
            'name': 'Northwind Estates',
            'email': 'info@northwind.test',
            'phone': '0123456789',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Lead')

    def test_short_phone_is_rejected(self):
        response = self.client.post('/api/v1/clients/', {
            'name': 'Northwind Estates',
            'email': 'info@northwind.test',
            'phone': '12345',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('phone', response.data)

    def test_search_clients(self):
        TestDataFactory.create_client(name='Acme Builders')
        TestDataFactory.create_client(name='Zenith Homes')
        response = self.client.get('/api/v1/clients/', {'search': 'acme'})
        self.assertEqual(len(response.data), 1)

    def test_add_interaction(self):
        client_record = TestDataFactory.create_client()
        response = self.client.post(f'/api/v1/clients/{client_record.id}/interactions/', {
            'type': 'Meeting',
            'notes': 'Walked the site with the owner.',
            'date': timezone.now().isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(client_record.interactions.count(), 1)

    def test_client_with_projects_cannot_be_deleted(self):
        client_record = TestDataFactory.create_client()
        TestDataFactory.create_project(client=client_record)
        response = self.client.delete(f'/api/v1/clients/{client_record.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Client.objects.filter(pk=client_record.pk).exists())

    def test_delete_unused_client(self):
        client_record = TestDataFactory.create_client()
        response = self.client.delete(f'/api/v1/clients/{client_record.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_ai_summary_without_interactions(self):
        client_record = TestDataFactory.create_client()
        response = self.client.post(f'/api/v1/clients/{client_record.id}/ai-summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('No interactions', response.data['summary'])


class SupplierAPITests(TestCase):
    """Test supplier endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier()

    def test_evaluate_supplier(self):
        response = self.client.post(f'/api/v1/suppliers/{self.supplier.id}/evaluate/', {
            'rating': 4,
            'evaluation_notes': 'Reliable deliveries.',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Supplier.objects.get(pk=self.supplier.pk).rating, 4)

    def test_rating_out_of_range(self):
        response = self.client.post(f'/api/v1/suppliers/{self.supplier.id}/evaluate/', {'rating': 6}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_rating_is_not_writable_through_update(self):
        response = self.client.patch(f'/api/v1/suppliers/{self.supplier.id}/', {'rating': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(Supplier.objects.get(pk=self.supplier.pk).rating)

    @mock.patch('buildops.parties.views.flows.summarize_supplier_performance')
    def test_ai_summary(self, mock_flow):
        mock_flow.return_value = {'summary': 'Dependable supplier.'}
        TestDataFactory.create_purchase_order(supplier=self.supplier)
        response = self.client.post(f'/api/v1/suppliers/{self.supplier.id}/ai-summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary'], 'Dependable supplier.')
        purchase_orders = mock_flow.call_args[0][3]
        self.assertEqual(len(purchase_orders), 1)
