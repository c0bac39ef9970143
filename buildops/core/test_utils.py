"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from buildops.parties.models import Client, Supplier
from buildops.hr.models import Employee, JobPosting, Candidate
from buildops.projects.models import Project
from buildops.inventory.models import InventoryItem, MaterialRequest, Warehouse, InventoryCategory
from buildops.procurement.models import PurchaseOrder
from buildops.financials.models import Account
from buildops.invoicing.models import Invoice, InvoiceLineItem
from buildops.assets.models import Asset
from decimal import Decimal
from django.utils import timezone
from datetime import timedelta
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False, role='user'):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser,
            role=role,
        )

    @staticmethod
    def create_client(name=None, email=None, status='Active'):
        if not name:
            name = f'Client_{TestDataFactory.random_string(6)}'
        return Client.objects.create(
            name=name,
            company=f'{name} Holdings',
            email=email or f'{name.lower()}@test.com',
            phone=f'9{random.randint(100000000, 999999999)}',
            status=status,
        )

    @staticmethod
    def create_supplier(name=None, status='Active'):
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        return Supplier.objects.create(
            name=name,
            contact_person='Sam Contact',
            email=f'{name.lower()}@test.com',
            phone='5550001111',
            status=status,
        )

    @staticmethod
    def create_employee(name=None, email=None, salary=Decimal('3000.00'), status='Active', role='Site Engineer'):
        """Create a test employee"""
        if not name:
            name = f'Employee_{TestDataFactory.random_string(6)}'
        return Employee.objects.create(
            name=name,
            email=email or f'{TestDataFactory.random_string(8).lower()}@test.com',
            role=role,
            department='Engineering',
            status=status,
            salary=salary,
        )

    @staticmethod
    def create_job(title='Site Supervisor', department='Operations', status='Open'):
        return JobPosting.objects.create(title=title, department=department, status=status)

    @staticmethod
    def create_candidate(job=None, name=None, email=None):
        if job is None:
            job = TestDataFactory.create_job()
        if not name:
            name = f'Candidate_{TestDataFactory.random_string(6)}'
        return Candidate.objects.create(
            job=job,
            name=name,
            email=email or f'{TestDataFactory.random_string(8).lower()}@test.com',
        )

    @staticmethod
    def create_project(name=None, client=None, budget=Decimal('100000.00'), status='In Progress'):
        """Create a test project"""
        if not name:
            name = f'Project_{TestDataFactory.random_string(6)}'
        return Project.objects.create(
            name=name,
            description='Test construction project',
            location='Test Site',
            budget=budget,
            start_date=timezone.localdate(),
            status=status,
            client=client,
        )

    @staticmethod
    def create_warehouse(name=None):
        if not name:
            name = f'Warehouse_{TestDataFactory.random_string(6)}'
        return Warehouse.objects.create(name=name, location='Yard')

    @staticmethod
    def create_category(name=None):
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return InventoryCategory.objects.create(name=name)

    @staticmethod
    def create_item(name=None, quantity=50, category=None, warehouse=None):
        """Create a test inventory item; status follows quantity"""
        if not name:
            name = f'Item_{TestDataFactory.random_string(6)}'
        return InventoryItem.objects.create(
            name=name,
            quantity=quantity,
            category=category,
            warehouse=warehouse,
        )

    @staticmethod
    def create_material_request(project=None, item=None, quantity=5, status='Pending'):
        if project is None:
            project = TestDataFactory.create_project()
        if item is None:
            item = TestDataFactory.create_item()
        return MaterialRequest.objects.create(
            project=project,
            item=item,
            item_name=item.name,
            quantity=quantity,
            status=status,
        )

    @staticmethod
    def create_purchase_order(item=None, supplier=None, project=None, quantity=10,
                              unit_cost=Decimal('25.00'), status='Pending'):
        """Create a test purchase order"""
        if item is None:
            item = TestDataFactory.create_item()
        if supplier is None:
            supplier = TestDataFactory.create_supplier()
        if project is None:
            project = TestDataFactory.create_project()
        return PurchaseOrder.objects.create(
            item=item,
            item_name=item.name,
            quantity=quantity,
            unit_cost=unit_cost,
            supplier=supplier,
            project=project,
            status=status,
        )

    @staticmethod
    def create_account(name=None, initial_balance=Decimal('10000.00')):
        if not name:
            name = f'Account_{TestDataFactory.random_string(6)}'
        return Account.objects.create(
            name=name,
            bank_name='Test Bank',
            account_number=TestDataFactory.random_string(10),
            initial_balance=initial_balance,
        )

    @staticmethod
    def create_invoice(client=None, project=None, lines=None, status='Draft'):
        """Create a test invoice with line items; ``lines`` is [(description, quantity, unit_price)]"""
        if client is None:
            client = TestDataFactory.create_client()
        if lines is None:
            lines = [('Concrete works', Decimal('2'), Decimal('500.00'))]
        today = timezone.localdate()
        invoice = Invoice.objects.create(
            invoice_number=f'INV-{random.randint(0, 999999):06d}',
            client=client,
            project=project,
            issue_date=today,
            due_date=today + timedelta(days=30),
            status=status,
        )
        for description, quantity, unit_price in lines:
            InvoiceLineItem.objects.create(
                invoice=invoice, description=description, quantity=quantity, unit_price=unit_price
            )
        invoice.recalculate_total()
        invoice.save(update_fields=['total_amount'])
        return invoice

    @staticmethod
    def create_asset(name=None, status='Available', project=None):
        if not name:
            name = f'Asset_{TestDataFactory.random_string(6)}'
        return Asset.objects.create(
            name=name,
            category='Heavy Equipment',
            status=status,
            purchase_date=timezone.localdate(),
            purchase_cost=Decimal('45000.00'),
            current_project=project,
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
