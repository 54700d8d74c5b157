"""
Test suite for the core module
Tests: access policy predicate, sign-up/sign-in, user listing and the audit trail
"""
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase, RequestFactory
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken
from perfumery.core import permissions as policy
from perfumery.core.models import User, AuditLog
from perfumery.core.test_utils import TestDataFactory, AuthenticatedAPIClient, TEST_PASSWORD
from perfumery.core.utils import create_audit_log, get_client_ip


class AccessPolicyTests(TestCase):
    """Pure predicate: no database access needed"""

    def test_admin_may_do_everything(self):
        for resource in (policy.CATALOG, policy.ORDER):
            for action in (policy.READ, policy.CREATE, policy.UPDATE, policy.DELETE, policy.UPDATE_STATUS):
                self.assertTrue(policy.is_allowed(policy.ROLE_ADMIN, 1, action, resource))

    def test_anyone_reads_catalog(self):
        self.assertTrue(policy.is_allowed(None, None, policy.READ, policy.CATALOG))
        self.assertTrue(policy.is_allowed(policy.ROLE_CLIENT, 3, policy.READ, policy.CATALOG))

    def test_only_suppliers_create_catalog_items(self):
        self.assertTrue(policy.is_allowed(policy.ROLE_SUPPLIER, 2, policy.CREATE, policy.CATALOG))
        self.assertFalse(policy.is_allowed(policy.ROLE_CLIENT, 3, policy.CREATE, policy.CATALOG))
        self.assertFalse(policy.is_allowed(None, None, policy.CREATE, policy.CATALOG))

    def test_supplier_modifies_only_own_items(self):
        self.assertTrue(policy.is_allowed(policy.ROLE_SUPPLIER, 2, policy.UPDATE, policy.CATALOG, owner_id=2))
        self.assertTrue(policy.is_allowed(policy.ROLE_SUPPLIER, 2, policy.DELETE, policy.CATALOG, owner_id=2))
        self.assertFalse(policy.is_allowed(policy.ROLE_SUPPLIER, 2, policy.UPDATE, policy.CATALOG, owner_id=9))
        self.assertFalse(policy.is_allowed(policy.ROLE_SUPPLIER, 2, policy.DELETE, policy.CATALOG, owner_id=None))

    def test_only_clients_create_orders(self):
        self.assertTrue(policy.is_allowed(policy.ROLE_CLIENT, 3, policy.CREATE, policy.ORDER))
        self.assertFalse(policy.is_allowed(policy.ROLE_SUPPLIER, 2, policy.CREATE, policy.ORDER))
        self.assertFalse(policy.is_allowed(None, None, policy.CREATE, policy.ORDER))

    def test_client_reads_own_orders_only(self):
        self.assertTrue(policy.is_allowed(policy.ROLE_CLIENT, 3, policy.READ, policy.ORDER, owner_id=3))
        self.assertFalse(policy.is_allowed(policy.ROLE_CLIENT, 3, policy.READ, policy.ORDER, owner_id=4))

    def test_supplier_reads_and_updates_orders_with_own_products(self):
        self.assertTrue(policy.is_allowed(policy.ROLE_SUPPLIER, 2, policy.READ, policy.ORDER, owner_id=3, supplier_ids={2, 5}))
        self.assertTrue(policy.is_allowed(policy.ROLE_SUPPLIER, 2, policy.UPDATE_STATUS, policy.ORDER, supplier_ids=[2]))
        self.assertFalse(policy.is_allowed(policy.ROLE_SUPPLIER, 2, policy.READ, policy.ORDER, supplier_ids={5}))
        self.assertFalse(policy.is_allowed(policy.ROLE_SUPPLIER, 2, policy.UPDATE_STATUS, policy.ORDER, supplier_ids=()))

    def test_client_cannot_update_order_status(self):
        self.assertFalse(policy.is_allowed(policy.ROLE_CLIENT, 3, policy.UPDATE_STATUS, policy.ORDER, owner_id=3))

    def test_unknown_resource_denied(self):
        self.assertFalse(policy.is_allowed(policy.ROLE_SUPPLIER, 2, policy.READ, 'warehouse'))


class RoleResolutionTests(TestCase):

    def test_superuser_is_admin(self):
        user = TestDataFactory.create_user(role=User.ROLE_CLIENT, is_superuser=True)
        self.assertEqual(policy.get_role(user), policy.ROLE_ADMIN)
        self.assertTrue(policy.is_admin_user(user))

    def test_role_field_used(self):
        supplier = TestDataFactory.create_supplier()
        self.assertEqual(policy.get_role(supplier), policy.ROLE_SUPPLIER)

    def test_anonymous_has_no_role(self):
        self.assertIsNone(policy.get_role(None))


class AuthAPITests(TestCase):
    """Sign-up, sign-in and current-user endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_signup_defaults_to_client(self):
        response = self.client.post('/api/auth/signup/', {
            'email': 'alice@example.com',
            'password': TEST_PASSWORD,
            'full_name': 'Alice Client',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['role'], User.ROLE_CLIENT)
        self.assertEqual(response.data['username'], 'alice@example.com')
        self.assertNotIn('password', response.data)
        self.assertTrue(User.objects.get(email='alice@example.com').check_password(TEST_PASSWORD))

    def test_signup_as_supplier(self):
        response = self.client.post('/api/auth/signup/', {
            'email': 'sam@example.com',
            'password': TEST_PASSWORD,
            'role': User.ROLE_SUPPLIER,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['role'], User.ROLE_SUPPLIER)

    def test_signup_requires_email_and_password(self):
        response = self.client.post('/api/auth/signup/', {'email': 'nopass@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Email and password are required')

    def test_signup_duplicate_email(self):
        TestDataFactory.create_client(email='taken@example.com')
        response = self.client.post('/api/auth/signup/', {
            'email': 'taken@example.com',
            'password': TEST_PASSWORD,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_signup_rejects_invalid_role(self):
        response = self.client.post('/api/auth/signup/', {
            'email': 'mallory@example.com',
            'password': TEST_PASSWORD,
            'role': 'Overlord',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_signin_token_carries_claims(self):
        user = TestDataFactory.create_supplier(email='sup@example.com', full_name='Sup Plier')
        response = self.client.post('/api/auth/signin/', {
            'username': 'sup@example.com',
            'password': TEST_PASSWORD,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['id'], user.id)

        token = AccessToken(response.data['access'])
        self.assertEqual(str(token['user_id']), str(user.id))
        self.assertEqual(token['email'], 'sup@example.com')
        self.assertEqual(token['full_name'], 'Sup Plier')
        self.assertEqual(token['role'], User.ROLE_SUPPLIER)

    def test_signin_wrong_password(self):
        TestDataFactory.create_client(email='bob@example.com')
        response = self.client.post('/api/auth/signin/', {
            'username': 'bob@example.com',
            'password': 'wrong-password',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_issues_new_access_token(self):
        TestDataFactory.create_client(email='carol@example.com')
        tokens = self.client.post('/api/auth/signin/', {
            'username': 'carol@example.com',
            'password': TEST_PASSWORD,
        }, format='json').data
        response = self.client.post('/api/auth/refresh/', {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_returns_effective_role(self):
        admin = TestDataFactory.create_user(role=User.ROLE_CLIENT, is_superuser=True)
        self.client.authenticate_user(admin)
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], admin.id)
        self.assertEqual(response.data['role'], User.ROLE_ADMIN)


class UserListAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        for _ in range(3):
            TestDataFactory.create_client()

    def test_admin_lists_users_paginated(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/users/', {'page': 1, 'page_size': 2})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 4)
        self.assertEqual(len(response.data['results']), 2)
        self.assertEqual(response.data['total_pages'], 2)

    def test_invalid_page_parameters(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/users/', {'page': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_non_admin_forbidden(self):
        self.client.authenticate_user(TestDataFactory.create_supplier())
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class AuditLogTests(TestCase):

    def setUp(self):
        self.factory = RequestFactory()
        self.user = TestDataFactory.create_admin()

    def test_create_audit_log_records_user_and_ip(self):
        request = self.factory.post('/api/perfumes/', HTTP_X_FORWARDED_FOR='10.0.0.1, 10.0.0.2')
        request.user = self.user
        log = create_audit_log(request=request, action='create', model_name='Perfume',
                               object_id=7, object_name='Oud', changes={'name': 'Oud'})
        self.assertIsNotNone(log)
        self.assertEqual(log.user, self.user)
        self.assertEqual(log.object_id, '7')
        self.assertEqual(log.ip_address, '10.0.0.1')
        self.assertEqual(log.changes, {'name': 'Oud'})

    def test_missing_fields_skip_logging(self):
        self.assertIsNone(create_audit_log(action='create', model_name='Perfume'))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_unknown_action_skips_logging(self):
        perfume = TestDataFactory.create_perfume()
        self.assertIsNone(create_audit_log(user=self.user, action='stock_sale', instance=perfume))
        self.assertIsNone(create_audit_log(user=self.user, action=None, instance=perfume))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_target_taken_from_instance(self):
        perfume = TestDataFactory.create_perfume(name='Vetiver Dusk')
        log = create_audit_log(user=self.user, action='update', instance=perfume)
        self.assertEqual(log.model_name, 'Perfume')
        self.assertEqual(log.object_id, str(perfume.id))
        self.assertEqual(log.object_name, 'Vetiver Dusk')

        order = TestDataFactory.create_order(TestDataFactory.create_client())
        log = create_audit_log(user=self.user, action='order_status', instance=order)
        self.assertEqual(log.model_name, 'Order')
        self.assertEqual(log.object_name, f'Order-{order.id}')
        self.assertIsNone(log.ip_address)

    def test_anonymous_request_user_not_recorded(self):
        request = self.factory.get('/', REMOTE_ADDR='192.168.1.9')
        request.user = AnonymousUser()
        log = create_audit_log(request=request, action='delete', model_name='Component', object_id='3')
        self.assertIsNone(log.user)
        self.assertEqual(log.ip_address, '192.168.1.9')

    def test_client_ip_from_remote_addr(self):
        request = self.factory.get('/', REMOTE_ADDR='192.168.1.5')
        self.assertEqual(get_client_ip(request), '192.168.1.5')

    def test_audit_log_endpoint_admin_only(self):
        create_audit_log(user=self.user, action='order_status', model_name='Order', object_id='1')
        create_audit_log(user=self.user, action='create', model_name='Perfume', object_id='2')

        client = AuthenticatedAPIClient()
        client.authenticate_user(self.user)
        response = client.get('/api/audit-logs/', {'action': 'order_status'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['model_name'], 'Order')

        client.authenticate_user(TestDataFactory.create_client())
        response = client.get('/api/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
