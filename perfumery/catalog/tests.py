"""
Test suite for the catalog module
Tests: perfume/component listing and filters, ownership rules on create/update/delete
"""
from decimal import Decimal
from unittest import mock
from django.db import DatabaseError, transaction
from django.test import TestCase
from rest_framework import status
from perfumery.catalog.models import Perfume, Component
from perfumery.catalog.serializers import PerfumeSerializer
from perfumery.core.exceptions import ConcurrencyConflict, NotFound
from perfumery.core.models import AuditLog
from perfumery.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from perfumery.orders.models import OrderItem


class PerfumeListAPITests(TestCase):
    """Anonymous reads and query-string filters"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.supplier = TestDataFactory.create_supplier()
        self.other_supplier = TestDataFactory.create_supplier()
        self.rose = TestDataFactory.create_perfume(supplier=self.supplier, name='Rose Water', price=Decimal('12.00'), available_quantity=5)
        self.oud = TestDataFactory.create_perfume(supplier=self.other_supplier, name='Oud Noir', price=Decimal('80.00'), available_quantity=0,
                                                  description='Smoky rose accord')

    def test_anonymous_list(self):
        response = self.client.get('/api/perfumes/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]['supplier_name'], self.supplier.full_name)

    def test_anonymous_detail(self):
        response = self.client.get(f'/api/perfumes/{self.rose.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Rose Water')
        self.assertEqual(response.data['supplier_id'], self.supplier.id)

    def test_detail_not_found(self):
        response = self.client.get('/api/perfumes/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_search_matches_name_and_description(self):
        response = self.client.get('/api/perfumes/', {'search': 'rose'})
        self.assertEqual({p['id'] for p in response.data}, {self.rose.id, self.oud.id})
        response = self.client.get('/api/perfumes/', {'search': 'water'})
        self.assertEqual([p['id'] for p in response.data], [self.rose.id])

    def test_price_range_filter(self):
        response = self.client.get('/api/perfumes/', {'min_price': '50'})
        self.assertEqual([p['id'] for p in response.data], [self.oud.id])
        response = self.client.get('/api/perfumes/', {'max_price': '50'})
        self.assertEqual([p['id'] for p in response.data], [self.rose.id])

    def test_supplier_and_stock_filters(self):
        response = self.client.get('/api/perfumes/', {'supplier': self.other_supplier.id})
        self.assertEqual([p['id'] for p in response.data], [self.oud.id])
        response = self.client.get('/api/perfumes/', {'in_stock': 'true'})
        self.assertEqual([p['id'] for p in response.data], [self.rose.id])
        response = self.client.get('/api/perfumes/', {'in_stock': 'false'})
        self.assertEqual([p['id'] for p in response.data], [self.oud.id])

    def test_unknown_supplier_name(self):
        self.rose.supplier = None
        self.rose.save()
        response = self.client.get(f'/api/perfumes/{self.rose.id}/')
        self.assertEqual(response.data['supplier_name'], 'Unknown')


class PerfumeWriteAPITests(TestCase):
    """Create/update/delete ownership rules"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.supplier = TestDataFactory.create_supplier()
        self.other_supplier = TestDataFactory.create_supplier()
        self.admin = TestDataFactory.create_admin()
        self.perfume = TestDataFactory.create_perfume(supplier=self.supplier, name='Citrus', price=Decimal('15.00'),
                                                      description='Fresh')

    def test_anonymous_create_unauthorized(self):
        response = self.client.post('/api/perfumes/', {'name': 'X', 'price': '1.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_supplier_creates_own_perfume(self):
        self.client.authenticate_user(self.supplier)
        response = self.client.post('/api/perfumes/', {
            'name': 'Amber',
            'price': '30.00',
            'available_quantity': 4,
            # ignored for suppliers
            'supplier_id': self.other_supplier.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        perfume = Perfume.objects.get(id=response.data['id'])
        self.assertEqual(perfume.supplier, self.supplier)
        self.assertEqual(perfume.available_quantity, 4)
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Perfume', object_id=str(perfume.id)).exists())

    def test_create_requires_name(self):
        self.client.authenticate_user(self.supplier)
        response = self.client.post('/api/perfumes/', {'price': '30.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)

    def test_create_rejects_negative_price(self):
        self.client.authenticate_user(self.supplier)
        response = self.client.post('/api/perfumes/', {'name': 'Bad', 'price': '-1.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_client_cannot_create(self):
        self.client.authenticate_user(TestDataFactory.create_client())
        response = self.client.post('/api/perfumes/', {'name': 'Nope', 'price': '1.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_create_requires_supplier_id(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/perfumes/', {'name': 'Vetiver', 'price': '22.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Supplier ID is required')

    def test_admin_creates_for_supplier(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/perfumes/', {
            'name': 'Vetiver', 'price': '22.00', 'supplier_id': self.other_supplier.id
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['supplier_id'], self.other_supplier.id)

    def test_admin_cannot_assign_non_supplier(self):
        self.client.authenticate_user(self.admin)
        client_user = TestDataFactory.create_client()
        response = self.client.post('/api/perfumes/', {
            'name': 'Vetiver', 'price': '22.00', 'supplier_id': client_user.id
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_owner_updates_and_keeps_omitted_fields(self):
        self.client.authenticate_user(self.supplier)
        response = self.client.put(f'/api/perfumes/{self.perfume.id}/', {
            'price': '18.50',
            'available_quantity': 7,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.perfume.refresh_from_db()
        self.assertEqual(self.perfume.price, Decimal('18.50'))
        self.assertEqual(self.perfume.available_quantity, 7)
        self.assertEqual(self.perfume.name, 'Citrus')
        self.assertEqual(self.perfume.description, 'Fresh')

    def test_supplier_cannot_reassign_supplier(self):
        self.client.authenticate_user(self.supplier)
        response = self.client.patch(f'/api/perfumes/{self.perfume.id}/', {
            'supplier_id': self.other_supplier.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.perfume.refresh_from_db()
        self.assertEqual(self.perfume.supplier, self.supplier)

    def test_admin_reassigns_supplier(self):
        self.client.authenticate_user(self.admin)
        response = self.client.patch(f'/api/perfumes/{self.perfume.id}/', {
            'supplier_id': self.other_supplier.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.perfume.refresh_from_db()
        self.assertEqual(self.perfume.supplier, self.other_supplier)

    def test_other_supplier_cannot_update(self):
        self.client.authenticate_user(self.other_supplier)
        response = self.client.patch(f'/api/perfumes/{self.perfume.id}/', {'price': '1.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.perfume.refresh_from_db()
        self.assertEqual(self.perfume.price, Decimal('15.00'))

    def test_other_supplier_cannot_delete(self):
        self.client.authenticate_user(self.other_supplier)
        response = self.client.delete(f'/api/perfumes/{self.perfume.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Perfume.objects.filter(id=self.perfume.id).exists())

    def test_owner_deletes(self):
        self.client.authenticate_user(self.supplier)
        response = self.client.delete(f'/api/perfumes/{self.perfume.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Perfume.objects.filter(id=self.perfume.id).exists())
        self.assertTrue(AuditLog.objects.filter(action='delete', model_name='Perfume').exists())

    def test_delete_keeps_order_line_snapshot(self):
        order = TestDataFactory.create_order(TestDataFactory.create_client(), perfumes=[(self.perfume, 2)])
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/perfumes/{self.perfume.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        item = OrderItem.objects.get(order=order)
        self.assertIsNone(item.perfume)
        self.assertEqual(item.unit_price, Decimal('15.00'))
        self.assertEqual(item.quantity, 2)

    def test_update_of_vanished_row(self):
        serializer = PerfumeSerializer(self.perfume, data={'price': '19.00'}, partial=True)
        self.assertTrue(serializer.is_valid())
        Perfume.objects.filter(id=self.perfume.id).delete()
        with self.assertRaises(NotFound):
            serializer.save()

    def test_update_of_vanished_row_inside_transaction(self):
        """The existence check must still run when the caller holds a transaction"""
        serializer = PerfumeSerializer(self.perfume, data={'price': '19.00'}, partial=True)
        self.assertTrue(serializer.is_valid())
        with transaction.atomic():
            Perfume.objects.filter(id=self.perfume.id).delete()
            with self.assertRaises(NotFound):
                serializer.save()
            # The transaction stays usable after the failed write
            self.assertFalse(Perfume.objects.filter(id=self.perfume.id).exists())

    def test_update_failure_on_existing_row_is_conflict(self):
        serializer = PerfumeSerializer(self.perfume, data={'price': '19.00'}, partial=True)
        self.assertTrue(serializer.is_valid())
        with mock.patch.object(Perfume, 'save', side_effect=DatabaseError('row changed')):
            with self.assertRaises(ConcurrencyConflict):
                serializer.save()


class ComponentAPITests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.supplier = TestDataFactory.create_supplier()
        self.component = TestDataFactory.create_component(supplier=self.supplier, name='Bergamot Oil',
                                                          price_per_unit=Decimal('3.00'), available_quantity=20)

    def test_components_require_authentication(self):
        response = self.client.get('/api/components/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_authenticated_list(self):
        self.client.authenticate_user(TestDataFactory.create_client())
        response = self.client.get('/api/components/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['price_per_unit'], Decimal('3.00'))

    def test_price_filter_uses_price_per_unit(self):
        TestDataFactory.create_component(supplier=self.supplier, price_per_unit=Decimal('9.00'))
        self.client.authenticate_user(self.supplier)
        response = self.client.get('/api/components/', {'max_price': '5'})
        self.assertEqual([c['id'] for c in response.data], [self.component.id])

    def test_supplier_creates_component(self):
        self.client.authenticate_user(self.supplier)
        response = self.client.post('/api/components/', {
            'name': 'Musk', 'price_per_unit': '1.25', 'available_quantity': 100
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Component.objects.get(id=response.data['id']).supplier, self.supplier)

    def test_other_supplier_cannot_update_component(self):
        self.client.authenticate_user(TestDataFactory.create_supplier())
        response = self.client.patch(f'/api/components/{self.component.id}/', {'available_quantity': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_owner_deletes_component(self):
        self.client.authenticate_user(self.supplier)
        response = self.client.delete(f'/api/components/{self.component.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Component.objects.filter(id=self.component.id).exists())
