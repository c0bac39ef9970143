"""
Test suite for Invoicing module
Tests: draft creation, editing rules, status changes and payment into an account
"""
from decimal import Decimal
from django.http import Http404
from django.test import TestCase
from rest_framework import status
from buildops.core.exceptions import ConflictError, DomainError, InvalidTransitionError
from buildops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from buildops.financials.models import Transaction
from buildops.invoicing.models import Invoice
from buildops.invoicing import services


class InvoiceServiceTests(TestCase):
    """Test the invoice lifecycle"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client_record = TestDataFactory.create_client()
        self.project = TestDataFactory.create_project(client=self.client_record)
        self.account = TestDataFactory.create_account()

    def test_invoice_number_format(self):
        number = services.generate_invoice_number()
        self.assertRegex(number, r'^INV-\d{6}$')

    def test_mark_paid_records_income(self):
        invoice = TestDataFactory.create_invoice(client=self.client_record, project=self.project, lines=[
            ('Foundations', Decimal('1'), Decimal('1500.00')),
            ('Labour', Decimal('2.5'), Decimal('40.00')),
        ])
        self.assertEqual(invoice.total_amount, Decimal('1600.00'))

        services.mark_paid(invoice.id, self.account, user=self.user)

        invoice.refresh_from_db()
        self.assertEqual(invoice.status, 'Paid')
        self.assertIsNotNone(invoice.paid_at)
        txn = invoice.payment_transaction
        self.assertEqual(txn.type, 'Income')
        self.assertEqual(txn.amount, Decimal('1600.00'))
        self.assertEqual(txn.client, self.client_record)
        self.assertEqual(txn.project, self.project)
        self.assertEqual(txn.description, f'Payment for Invoice {invoice.invoice_number}')

    def test_invoice_cannot_be_paid_twice(self):
        invoice = TestDataFactory.create_invoice(client=self.client_record)
        services.mark_paid(invoice.id, self.account)
        with self.assertRaises(ConflictError):
            services.mark_paid(invoice.id, self.account)
        self.assertEqual(Transaction.objects.count(), 1)

    def test_void_invoice_cannot_be_paid(self):
        invoice = TestDataFactory.create_invoice(client=self.client_record)
        services.change_status(invoice.id, 'Void')
        with self.assertRaises(InvalidTransitionError):
            services.mark_paid(invoice.id, self.account)
        self.assertFalse(Transaction.objects.exists())

    def test_zero_total_invoice_is_paid_without_a_transaction(self):
        invoice = TestDataFactory.create_invoice(client=self.client_record, lines=[
            ('Site survey (complimentary)', Decimal('1'), Decimal('0.00')),
        ])
        self.assertEqual(invoice.total_amount, Decimal('0.00'))

        services.mark_paid(invoice.id, self.account, user=self.user)

        invoice.refresh_from_db()
        self.assertEqual(invoice.status, 'Paid')
        self.assertIsNotNone(invoice.paid_at)
        self.assertIsNone(invoice.payment_transaction)
        self.assertFalse(Transaction.objects.exists())

    def test_missing_invoice_raises_not_found(self):
        with self.assertRaises(Http404):
            services.mark_paid(999999, self.account)

    def test_paid_invoice_status_is_final(self):
        invoice = TestDataFactory.create_invoice(client=self.client_record)
        services.mark_paid(invoice.id, self.account)
        with self.assertRaises(InvalidTransitionError):
            services.change_status(invoice.id, 'Void')

    def test_only_drafts_can_be_edited_or_deleted(self):
        invoice = TestDataFactory.create_invoice(client=self.client_record)
        services.change_status(invoice.id, 'Sent')
        with self.assertRaises(DomainError):
            services.update_invoice(invoice.id, line_items=[
                {'description': 'Extra', 'quantity': Decimal('1'), 'unit_price': Decimal('1.00')}
            ])
        with self.assertRaises(DomainError):
            services.delete_invoice(invoice.id)
        self.assertTrue(Invoice.objects.filter(pk=invoice.pk).exists())


class InvoiceAPITests(TestCase):
    """Test invoice endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.client_record = TestDataFactory.create_client(name='Harbor Developments')
        self.account = TestDataFactory.create_account()

    def _payload(self, **overrides):
        payload = {
            'client': self.client_record.id,
            'issue_date': '2024-04-01',
            'due_date': '2024-05-01',
            'line_items': [
                {'description': 'Excavation', 'quantity': '3', 'unit_price': '200.00'},
                {'description': 'Haulage', 'quantity': '1', 'unit_price': '150.00'},
            ],
        }
        payload.update(overrides)
        return payload

    def test_create_invoice(self):
        response = self.client.post('/api/v1/invoices/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Draft')
        self.assertEqual(Decimal(response.data['total_amount']), Decimal('750.00'))
        self.assertRegex(response.data['invoice_number'], r'^INV-\d{6}$')
        self.assertEqual(len(response.data['line_items']), 2)

    def test_invoice_needs_line_items(self):
        response = self.client.post('/api/v1/invoices/', self._payload(line_items=[]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('line_items', response.data)

    def test_due_date_before_issue_date(self):
        response = self.client.post('/api/v1/invoices/', self._payload(due_date='2024-03-01'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('due_date', response.data)

    def test_edit_draft_replaces_lines(self):
        invoice_id = self.client.post('/api/v1/invoices/', self._payload(), format='json').data['id']
        response = self.client.patch(f'/api/v1/invoices/{invoice_id}/', {
            'line_items': [{'description': 'Flat fee', 'quantity': '1', 'unit_price': '99.00'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['total_amount']), Decimal('99.00'))
        self.assertEqual(len(response.data['line_items']), 1)

    def test_mark_paid_endpoint(self):
        invoice_id = self.client.post('/api/v1/invoices/', self._payload(), format='json').data['id']
        self.client.post(f'/api/v1/invoices/{invoice_id}/status/', {'status': 'Sent'}, format='json')

        response = self.client.post(f'/api/v1/invoices/{invoice_id}/mark-paid/', {'account': self.account.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'Paid')

        response = self.client.post(f'/api/v1/invoices/{invoice_id}/mark-paid/', {'account': self.account.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_mark_paid_zero_total_invoice(self):
        payload = self._payload(line_items=[{'description': 'Warranty visit', 'quantity': '1', 'unit_price': '0'}])
        response = self.client.post('/api/v1/invoices/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['total_amount']), Decimal('0.00'))

        response = self.client.post(f'/api/v1/invoices/{response.data["id"]}/mark-paid/', {'account': self.account.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'Paid')
        self.assertIsNone(response.data['payment_transaction'])

    def test_status_endpoint_rejects_paid(self):
        invoice_id = self.client.post('/api/v1/invoices/', self._payload(), format='json').data['id']
        response = self.client.post(f'/api/v1/invoices/{invoice_id}/status/', {'status': 'Paid'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_client_with_invoices_cannot_be_deleted(self):
        self.client.post('/api/v1/invoices/', self._payload(), format='json')
        response = self.client.delete(f'/api/v1/clients/{self.client_record.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
