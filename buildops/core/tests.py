"""
Test suite for Core module
Tests: authentication, current user, company profile, activity log and global search
"""
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from buildops.core.models import ActivityLog, CompanyProfile
from buildops.core.search import global_search
from buildops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from buildops.core.utils import log_activity


class AuthTests(TestCase):
    """Test login and the current user endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='siteadmin', password='testpass123', role='manager')
        self.client = AuthenticatedAPIClient()

    def test_login_returns_tokens(self):
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'siteadmin',
            'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'siteadmin',
            'password': 'wrong',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_unauthenticated_request_is_refused(self):
        response = self.client.get('/api/v1/projects/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_user_me_permissions(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'manager')
        self.assertFalse(response.data['is_admin'])
        self.assertTrue(response.data['can_approve'])


class CompanyProfileTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_profile_is_created_on_first_read(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get('/api/v1/company-profile/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(CompanyProfile.objects.count(), 1)

    def test_only_admins_can_update(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.put('/api/v1/company-profile/', {'name': 'Acme Build'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))
        response = self.client.put('/api/v1/company-profile/', {'name': 'Acme Build'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(CompanyProfile.load().name, 'Acme Build')


class ActivityLogTests(TestCase):
    """Test the activity feed"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_log_activity_records_user(self):
        entry = log_activity(user=self.user, type='PROJECT_CREATED', message='New project', link='/projects/1')
        self.assertEqual(entry.user, self.user)
        self.assertEqual(ActivityLog.objects.count(), 1)

    def test_log_activity_never_raises(self):
        entry = log_activity(type=None, message=None)
        self.assertIsNone(entry)

    def test_list_is_newest_first_and_filterable(self):
        log_activity(user=self.user, type='ASSET_ADDED', message='first')
        log_activity(user=self.user, type='PROJECT_CREATED', message='second')

        response = self.client.get('/api/v1/activity-log/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['message'], 'second')

        response = self.client.get('/api/v1/activity-log/', {'type': 'ASSET_ADDED'})
        self.assertEqual(len(response.data), 1)

    def test_invalid_limit(self):
        response = self.client.get('/api/v1/activity-log/', {'limit': 'many'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_date_range_filter(self):
        log_activity(user=self.user, type='ASSET_ADDED', message='today')
        today = timezone.localdate().isoformat()

        response = self.client.get('/api/v1/activity-log/', {'date_from': today, 'date_to': today})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

        response = self.client.get('/api/v1/activity-log/', {'date_from': '2999-01-01'})
        self.assertEqual(response.data, [])

    def test_invalid_dates(self):
        for params in ({'date_from': 'yesterday'}, {'date_to': '2024-13-45'}):
            response = self.client.get('/api/v1/activity-log/', params)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertIn('must be a date', response.data['error'])


class GlobalSearchTests(TestCase):
    """Test prefix search across collections"""

    def test_short_term_returns_nothing(self):
        TestDataFactory.create_project(name='Harbour Bridge')
        self.assertEqual(global_search('H'), [])
        self.assertEqual(global_search('   '), [])

    def test_prefix_match_is_case_insensitive(self):
        project = TestDataFactory.create_project(name='Harbour Bridge')
        TestDataFactory.create_project(name='New Harbour Wall')
        results = global_search('harb')
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0]['type'], 'Project')
        self.assertEqual(results[0]['url'], f'/projects/{project.id}')

    def test_inventory_results_link_to_item(self):
        item = TestDataFactory.create_item(name='Rebar 12mm', quantity=40)
        results = global_search('Rebar')
        self.assertEqual(results[0]['url'], f'/inventory/{item.id}')
        self.assertEqual(results[0]['context'], 'Qty: 40')

    def test_results_are_capped(self):
        for i in range(8):
            TestDataFactory.create_project(name=f'Tower {i}')
            TestDataFactory.create_asset(name=f'Tower Crane {i}')
        self.assertEqual(len(global_search('Tower')), 10)

    def test_search_endpoint(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user())
        TestDataFactory.create_client(name='Granite Holdings')
        response = client.get('/api/v1/search/', {'q': 'gran'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['type'], 'Client')
