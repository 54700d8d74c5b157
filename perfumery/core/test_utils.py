"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from perfumery.catalog.models import Perfume, Component
from perfumery.orders.models import Order, OrderItem, CustomPerfumeOrder, CustomPerfumeComponent
from decimal import Decimal
import random
import string

User = get_user_model()

TEST_PASSWORD = 'Str0ng-Passw0rd!'


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(role=User.ROLE_CLIENT, email=None, password=TEST_PASSWORD, full_name=None, is_superuser=False):
        """Create a test user; the email doubles as username"""
        if not email:
            email = f'{role.lower()}_{TestDataFactory.random_string(6).lower()}@test.com'
        return User.objects.create_user(
            username=email,
            email=email,
            password=password,
            full_name=full_name if full_name is not None else f'Test {role}',
            role=role,
            is_superuser=is_superuser,
            is_staff=is_superuser
        )

    @staticmethod
    def create_client(**kwargs):
        return TestDataFactory.create_user(role=User.ROLE_CLIENT, **kwargs)

    @staticmethod
    def create_supplier(**kwargs):
        return TestDataFactory.create_user(role=User.ROLE_SUPPLIER, **kwargs)

    @staticmethod
    def create_admin(**kwargs):
        return TestDataFactory.create_user(role=User.ROLE_ADMIN, **kwargs)

    @staticmethod
    def create_perfume(supplier=None, name=None, price=None, available_quantity=10, description=''):
        """Create a test perfume"""
        if not supplier:
            supplier = TestDataFactory.create_supplier()
        if not name:
            name = f'Perfume_{TestDataFactory.random_string(6)}'
        if price is None:
            price = Decimal('10.00')
        return Perfume.objects.create(
            name=name,
            description=description,
            price=price,
            available_quantity=available_quantity,
            supplier=supplier
        )

    @staticmethod
    def create_component(supplier=None, name=None, price_per_unit=None, available_quantity=10, description=''):
        """Create a test component"""
        if not supplier:
            supplier = TestDataFactory.create_supplier()
        if not name:
            name = f'Component_{TestDataFactory.random_string(6)}'
        if price_per_unit is None:
            price_per_unit = Decimal('2.50')
        return Component.objects.create(
            name=name,
            description=description,
            price_per_unit=price_per_unit,
            available_quantity=available_quantity,
            supplier=supplier
        )

    @staticmethod
    def create_order(client, perfumes=(), status=Order.STATUS_PENDING):
        """
        Create an order directly, bypassing stock checks.
        perfumes: iterable of (perfume, quantity)
        """
        order = Order.objects.create(client=client, status=status)
        total = Decimal('0.00')
        for perfume, quantity in perfumes:
            OrderItem.objects.create(order=order, perfume=perfume, quantity=quantity, unit_price=perfume.price)
            total += perfume.price * quantity
        order.total_price = total
        order.save(update_fields=['total_price'])
        return order

    @staticmethod
    def create_custom_order(client, components=(), notes='', status=Order.STATUS_PENDING):
        """
        Create a custom order directly, bypassing stock checks.
        components: iterable of (component, quantity)
        """
        order = Order.objects.create(client=client, status=status, is_custom_order=True)
        custom_order = CustomPerfumeOrder.objects.create(order=order, notes=notes)
        for component, quantity in components:
            CustomPerfumeComponent.objects.create(custom_order=custom_order, component=component, quantity=quantity)
        return order


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
