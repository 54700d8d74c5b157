"""
Test suite for the dashboards
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from perfumery.core.models import User
from perfumery.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from perfumery.orders.models import Order


class ClientDashboardTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client_user = TestDataFactory.create_client()
        self.perfume = TestDataFactory.create_perfume(price=Decimal('10.00'))
        for _ in range(4):
            TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume, 1)])
        for _ in range(2):
            TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume, 1)], status=Order.STATUS_DELIVERED)
        # Someone else's order never shows up
        TestDataFactory.create_order(TestDataFactory.create_client(), perfumes=[(self.perfume, 1)])

    def test_recent_orders_and_counts(self):
        self.client.authenticate_user(self.client_user)
        response = self.client.get('/api/dashboard/client/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['recent_orders']), 5)
        self.assertEqual(response.data['total_orders'], 6)
        self.assertEqual(response.data['orders_by_status'], {
            Order.STATUS_PENDING: 4,
            Order.STATUS_IN_PRODUCTION: 0,
            Order.STATUS_DELIVERED: 2,
        })
        self.assertTrue(all(o['client_id'] == self.client_user.id for o in response.data['recent_orders']))

    def test_supplier_cannot_open_client_dashboard(self):
        self.client.authenticate_user(TestDataFactory.create_supplier())
        response = self.client.get('/api/dashboard/client/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class SupplierDashboardTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.supplier = TestDataFactory.create_supplier()
        self.other_supplier = TestDataFactory.create_supplier()
        self.client_user = TestDataFactory.create_client()

        self.perfume = TestDataFactory.create_perfume(supplier=self.supplier, price=Decimal('20.00'))
        self.other_perfume = TestDataFactory.create_perfume(supplier=self.other_supplier, price=Decimal('50.00'))
        self.component = TestDataFactory.create_component(supplier=self.supplier)
        TestDataFactory.create_component(supplier=self.other_supplier)

        self.pending = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume, 1)])
        TestDataFactory.create_order(self.client_user, perfumes=[(self.other_perfume, 1)])
        # Mixed delivered order: only the own line counts as revenue
        TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume, 3), (self.other_perfume, 1)],
                                     status=Order.STATUS_DELIVERED)
        self.custom = TestDataFactory.create_custom_order(self.client_user, components=[(self.component, 2)])

    def test_supplier_overview(self):
        self.client.authenticate_user(self.supplier)
        response = self.client.get('/api/dashboard/supplier/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['id'] for p in response.data['perfumes']], [self.perfume.id])
        self.assertEqual([c['id'] for c in response.data['components']], [self.component.id])
        self.assertEqual([o['id'] for o in response.data['pending_orders']], [self.pending.id])
        self.assertEqual([c['order_id'] for c in response.data['custom_orders']], [self.custom.id])
        self.assertEqual(response.data['delivered_revenue'], 60.0)

    def test_client_cannot_open_supplier_dashboard(self):
        self.client.authenticate_user(self.client_user)
        response = self.client.get('/api/dashboard/supplier/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class AdminDashboardTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_admin()
        client_user = TestDataFactory.create_client()
        supplier = TestDataFactory.create_supplier()
        perfume = TestDataFactory.create_perfume(supplier=supplier, price=Decimal('15.00'))
        TestDataFactory.create_order(client_user, perfumes=[(perfume, 2)], status=Order.STATUS_DELIVERED)
        TestDataFactory.create_order(client_user, perfumes=[(perfume, 1)], status=Order.STATUS_IN_PRODUCTION)
        TestDataFactory.create_order(client_user, perfumes=[(perfume, 4)])

    def test_admin_overview(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/dashboard/admin/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['users_by_role'], {
            User.ROLE_CLIENT: 1,
            User.ROLE_SUPPLIER: 1,
            User.ROLE_ADMIN: 1,
        })
        self.assertEqual(response.data['total_users'], 3)
        self.assertEqual(response.data['total_orders'], 3)
        self.assertEqual(response.data['orders_by_status'][Order.STATUS_IN_PRODUCTION], 1)
        self.assertEqual(response.data['total_revenue'], 30.0)
        self.assertEqual(len(response.data['recent_orders']), 3)

    def test_non_admin_forbidden(self):
        self.client.authenticate_user(TestDataFactory.create_supplier())
        response = self.client.get('/api/dashboard/admin/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_unauthorized(self):
        response = self.client.get('/api/dashboard/admin/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
