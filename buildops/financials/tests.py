"""
Test suite for Financials module
Tests: account balances, transactions and income/expense summaries
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from buildops.core.exceptions import DomainError
from buildops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from buildops.financials.models import Transaction
from buildops.financials import services


class FinancialServiceTests(TestCase):

    def test_current_balance(self):
        account = TestDataFactory.create_account(initial_balance=Decimal('1000.00'))
        services.record_transaction(description='Deposit', amount='250.00', type='Income', account=account)
        services.record_transaction(description='Cement', amount='100.50', type='Expense', account=account)
        self.assertEqual(account.current_balance, Decimal('1149.50'))

    def test_summarize(self):
        account = TestDataFactory.create_account()
        services.record_transaction(description='Payment', amount=500, type='Income', account=account)
        services.record_transaction(description='Fuel', amount=120, type='Expense', account=account)
        totals = services.summarize()
        self.assertEqual(totals, {
            'income': Decimal('500.00'),
            'expenses': Decimal('120.00'),
            'net': Decimal('380.00'),
        })

    def test_summarize_empty(self):
        self.assertEqual(services.summarize()['net'], Decimal('0.00'))

    def test_non_positive_amount_is_refused(self):
        account = TestDataFactory.create_account()
        with self.assertRaises(DomainError):
            services.record_transaction(description='Nothing', amount=0, type='Income', account=account)

    def test_default_account_is_the_oldest(self):
        first = TestDataFactory.create_account(name='Zulu')
        TestDataFactory.create_account(name='Alpha')
        self.assertEqual(services.get_default_account(), first)

    def test_no_default_account(self):
        with self.assertRaises(DomainError):
            services.get_default_account()


class FinancialAPITests(TestCase):
    """Test account, transaction and summary endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.account = TestDataFactory.create_account(initial_balance=Decimal('0.00'))

    def test_record_transaction(self):
        project = TestDataFactory.create_project()
        response = self.client.post('/api/v1/transactions/', {
            'description': 'Site fencing',
            'amount': '750.00',
            'type': 'Expense',
            'date': '2024-02-14',
            'account': self.account.id,
            'project': project.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        txn = Transaction.objects.get(pk=response.data['id'])
        self.assertEqual(txn.created_by, self.user)

        response = self.client.get(f'/api/v1/accounts/{self.account.id}/')
        self.assertEqual(Decimal(response.data['current_balance']), Decimal('-750.00'))

    def test_zero_amount_is_rejected(self):
        response = self.client.post('/api/v1/transactions/', {
            'description': 'Nothing',
            'amount': '0.00',
            'type': 'Income',
            'date': '2024-02-14',
            'account': self.account.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)

    def test_filter_and_summary(self):
        services.record_transaction(description='A', amount=100, type='Income', account=self.account)
        services.record_transaction(description='B', amount=40, type='Expense', account=self.account)

        response = self.client.get('/api/v1/transactions/', {'type': 'Expense'})
        self.assertEqual(len(response.data), 1)

        response = self.client.get('/api/v1/financials/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(str(response.data['net'])), Decimal('60.00'))

    def test_account_with_transactions_cannot_be_deleted(self):
        services.record_transaction(description='A', amount=100, type='Income', account=self.account)
        response = self.client.delete(f'/api/v1/accounts/{self.account.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cannot delete account. It has existing transactions.')
