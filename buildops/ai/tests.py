"""
Test suite for AI module
Tests: Gemini client request/response handling, flow output shaping and the ISO compliance endpoint
"""
import json
from unittest import mock

import requests
from django.test import TestCase, override_settings
from rest_framework import status
from buildops.ai import flows
from buildops.ai.client import GenerativeClient
from buildops.core.exceptions import AIServiceError
from buildops.core.test_utils import TestDataFactory, AuthenticatedAPIClient

LONG_DESCRIPTION = (
    'We track projects, inventory and purchase orders in one system, but customer feedback '
    'is collected on paper and never reviewed.'
)


def fake_response(payload, status_code=200):
    response = mock.Mock()
    response.status_code = status_code
    response.text = json.dumps(payload)
    response.json.return_value = payload
    return response


def model_output(data):
    return {'candidates': [{'content': {'parts': [{'text': json.dumps(data)}]}}]}


class GenerativeClientTests(TestCase):
    """Test the REST client"""

    def setUp(self):
        self.client_ai = GenerativeClient(api_key='test-key', model='gemini-test', api_url='https://ai.example/v1')

    @mock.patch('buildops.ai.client.requests.post')
    def test_generate_json(self, mock_post):
        mock_post.return_value = fake_response(model_output({'summary': 'On track'}))

        data = self.client_ai.generate_json('prompt')

        self.assertEqual(data, {'summary': 'On track'})
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://ai.example/v1/models/gemini-test:generateContent')
        self.assertEqual(kwargs['params'], {'key': 'test-key'})
        self.assertEqual(kwargs['json']['generationConfig']['responseMimeType'], 'application/json')

    @mock.patch('buildops.ai.client.requests.post')
    def test_fenced_output_is_accepted(self, mock_post):
        fenced = '```json\n{"summary": "ok"}\n```'
        mock_post.return_value = fake_response({'candidates': [{'content': {'parts': [{'text': fenced}]}}]})
        self.assertEqual(self.client_ai.generate_json('prompt'), {'summary': 'ok'})

    @override_settings(GEMINI_API_KEY='')
    def test_missing_key(self):
        with self.assertRaises(AIServiceError):
            GenerativeClient(api_key='').generate_json('prompt')

    @mock.patch('buildops.ai.client.requests.post')
    def test_http_error(self, mock_post):
        mock_post.return_value = fake_response({'error': 'quota'}, status_code=429)
        with self.assertRaises(AIServiceError):
            self.client_ai.generate_json('prompt')

    @mock.patch('buildops.ai.client.requests.post', side_effect=requests.exceptions.Timeout)
    def test_timeout(self, mock_post):
        with self.assertRaises(AIServiceError):
            self.client_ai.generate_json('prompt')

    @mock.patch('buildops.ai.client.requests.post')
    def test_malformed_output(self, mock_post):
        mock_post.return_value = fake_response({'candidates': [{'content': {'parts': [{'text': 'not json'}]}}]})
        with self.assertRaises(AIServiceError):
            self.client_ai.generate_json('prompt')


class FlowTests(TestCase):
    """Test flow output shaping with a stub client"""

    def stub(self, data):
        client = mock.Mock()
        client.generate_json.return_value = data
        return client

    def test_risk_analysis_drops_unknown_severity(self):
        client = self.stub({'risks': [
            {'risk': 'Flooding', 'severity': 'High', 'mitigation': 'Drainage'},
            {'risk': 'Noise', 'severity': 'Extreme', 'mitigation': 'Barriers'},
        ]})
        result = flows.analyze_project_risks('Bridge', 'River crossing', 1000000, 'Delta', client=client)
        self.assertEqual(result, {'risks': [{'risk': 'Flooding', 'severity': 'High', 'mitigation': 'Drainage'}]})

    def test_empty_daily_logs_skip_the_model(self):
        client = self.stub({})
        result = flows.summarize_daily_logs([], client=client)
        self.assertEqual(result, {'summary': flows.NO_DAILY_LOGS_SUMMARY})
        client.generate_json.assert_not_called()

    def test_summary_requires_text(self):
        client = self.stub({'summary': ''})
        with self.assertRaises(AIServiceError):
            flows.summarize_employee_performance('Ann', 'Engineer', 'Civil', 'Active', [], client=client)

    def test_suggest_tasks_accepts_plain_strings(self):
        client = self.stub({'tasks': ['Site survey', {'name': 'Excavation', 'description': 'Dig'}, {'name': ''}]})
        result = flows.suggest_project_tasks('Tower', 'Office tower', client=client)
        self.assertEqual(result['tasks'], [
            {'name': 'Site survey', 'description': ''},
            {'name': 'Excavation', 'description': 'Dig'},
        ])


class ISOComplianceAPITests(TestCase):
    """Test the ISO 9001 suggestion endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_short_description_is_rejected(self):
        response = self.client.post('/api/v1/iso-compliance/', {'erpDescription': 'Too short'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Please provide a more detailed description (at least 50 characters).')
        self.assertTrue(response.data['error'])
        self.assertIsNone(response.data['data'])

    def test_non_object_body_is_rejected(self):
        response = self.client.post('/api/v1/iso-compliance/', [], format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid input.')
        self.assertTrue(response.data['error'])
        self.assertIsNone(response.data['data'])

    @mock.patch('buildops.ai.views.suggest_iso_compliance')
    def test_suggestions_returned(self, mock_flow):
        mock_flow.return_value = {'suggestions': ['Add a feedback form to closed projects.']}
        response = self.client.post('/api/v1/iso-compliance/', {'erpDescription': LONG_DESCRIPTION}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['error'])
        self.assertEqual(response.data['data']['suggestions'], ['Add a feedback form to closed projects.'])

    @mock.patch('buildops.ai.views.suggest_iso_compliance')
    def test_no_suggestions(self, mock_flow):
        mock_flow.return_value = {'suggestions': []}
        response = self.client.post('/api/v1/iso-compliance/', {'erpDescription': LONG_DESCRIPTION}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['error'])
        self.assertIsNone(response.data['data'])

    @mock.patch('buildops.ai.views.suggest_iso_compliance', side_effect=AIServiceError('AI service timed out.'))
    def test_ai_failure(self, mock_flow):
        response = self.client.post('/api/v1/iso-compliance/', {'erpDescription': LONG_DESCRIPTION}, format='json')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data['error'], 'AI service timed out.')
        self.assertIsNone(response.data['data'])
