"""
Test suite for Projects module
Tests: project CRUD, team assignment, tasks, daily logs, AI assistance and budget tracking
"""
from decimal import Decimal
from unittest import mock
from django.test import TestCase
from rest_framework import status
from buildops.core.exceptions import AIServiceError
from buildops.core.models import ActivityLog
from buildops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from buildops.financials.services import record_transaction
from buildops.projects.models import Project


class ProjectAPITests(TestCase):
    """Test project endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(email='pm@test.com')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.project = TestDataFactory.create_project(name='Riverside Offices')

    def test_create_project(self):
        response = self.client.post('/api/v1/projects/', {
            'name': 'Hillside Villas',
            'description': 'Twelve detached homes',
            'location': 'North Ridge',
            'budget': '2500000.00',
            'start_date': '2024-09-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Planning')
        self.assertTrue(ActivityLog.objects.filter(type='PROJECT_CREATED').exists())

    def test_budget_must_be_positive(self):
        response = self.client.post('/api/v1/projects/', {
            'name': 'Free Project',
            'budget': '0.00',
            'start_date': '2024-09-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('budget', response.data)

    def test_progress_cannot_exceed_100(self):
        response = self.client.patch(f'/api/v1/projects/{self.project.id}/', {'progress': 120}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_assign_team(self):
        first = TestDataFactory.create_employee()
        second = TestDataFactory.create_employee()
        response = self.client.put(
            f'/api/v1/projects/{self.project.id}/team/', {'employee_ids': [first.id, second.id]}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['team']), 2)

        response = self.client.put(f'/api/v1/projects/{self.project.id}/team/', {'employee_ids': [second.id]}, format='json')
        self.assertEqual(list(self.project.team.values_list('id', flat=True)), [second.id])

    def test_task_status_change(self):
        response = self.client.post(f'/api/v1/projects/{self.project.id}/tasks/', {'name': 'Pour slab'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'To Do')
        task_id = response.data['id']

        response = self.client.post(
            f'/api/v1/projects/{self.project.id}/tasks/{task_id}/status/', {'status': 'Done'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'Done')
        self.assertTrue(ActivityLog.objects.filter(type='TASK_STATUS_CHANGED').exists())

    def test_daily_log_records_author(self):
        response = self.client.post(
            f'/api/v1/projects/{self.project.id}/daily-logs/',
            {'notes': 'Formwork completed on level two.'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['author_email'], 'pm@test.com')

    def test_daily_log_too_short(self):
        response = self.client.post(f'/api/v1/projects/{self.project.id}/daily-logs/', {'notes': 'Rain'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_project(self):
        response = self.client.delete(f'/api/v1/projects/{self.project.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Project.objects.filter(pk=self.project.pk).exists())

    def test_financial_summary(self):
        account = TestDataFactory.create_account()
        project = TestDataFactory.create_project(budget=Decimal('1000.00'))
        record_transaction(description='Steel', amount='250.00', type='Expense', account=account, project=project)
        record_transaction(description='Progress payment', amount='400.00', type='Income', account=account, project=project)

        response = self.client.get(f'/api/v1/projects/{project.id}/financial-summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['expenses'], Decimal('250.00'))
        self.assertEqual(response.data['remaining_budget'], Decimal('750.00'))
        self.assertEqual(response.data['budget_used_percent'], Decimal('25.00'))


class ProjectAIAPITests(TestCase):
    """Test AI assisted project endpoints with the model mocked out"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.project = TestDataFactory.create_project()

    @mock.patch('buildops.projects.views.flows.analyze_project_risks')
    def test_risk_analysis(self, mock_flow):
        mock_flow.return_value = {'risks': [{'risk': 'Delay', 'severity': 'Medium', 'mitigation': 'Buffer'}]}
        response = self.client.post(f'/api/v1/projects/{self.project.id}/risk-analysis/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['risks'][0]['severity'], 'Medium')

    @mock.patch('buildops.projects.views.flows.analyze_project_risks', side_effect=AIServiceError('AI service is unavailable.'))
    def test_risk_analysis_failure(self, mock_flow):
        response = self.client.post(f'/api/v1/projects/{self.project.id}/risk-analysis/')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)

    def test_daily_log_summary_without_logs(self):
        response = self.client.post(f'/api/v1/projects/{self.project.id}/daily-logs/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('No daily logs', response.data['summary'])
