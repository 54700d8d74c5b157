"""
Comprehensive test suite for the orders module
Tests: stock order placement, custom blends, status transitions, read access and edge cases
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from perfumery.core.exceptions import (
    CatalogItemNotFound, Forbidden, InsufficientStock, NotFound, ValidationError
)
from perfumery.core.models import AuditLog
from perfumery.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from perfumery.orders import services
from perfumery.orders.models import Order, OrderItem, CustomPerfumeOrder, CustomPerfumeComponent
from perfumery.orders.serializers import OrderStatusUpdateSerializer


class OrderModelTests(TestCase):
    """Test Order and OrderItem model methods"""

    def setUp(self):
        self.client_user = TestDataFactory.create_client()
        self.perfume = TestDataFactory.create_perfume(price=Decimal('12.50'))

    def test_order_str(self):
        order = TestDataFactory.create_order(self.client_user)
        self.assertEqual(str(order), f'Order-{order.id}')

    def test_order_subtotal(self):
        other = TestDataFactory.create_perfume(price=Decimal('3.00'))
        order = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume, 2), (other, 5)])
        self.assertEqual(order.get_subtotal(), Decimal('40.00'))
        self.assertEqual(order.total_price, Decimal('40.00'))

    def test_status_rank(self):
        self.assertLess(Order.status_rank(Order.STATUS_PENDING), Order.status_rank(Order.STATUS_IN_PRODUCTION))
        self.assertLess(Order.status_rank(Order.STATUS_IN_PRODUCTION), Order.status_rank(Order.STATUS_DELIVERED))


class StandardOrderServiceTests(TestCase):
    """create_standard_order"""

    def setUp(self):
        self.client_user = TestDataFactory.create_client()
        self.supplier = TestDataFactory.create_supplier()
        self.perfume_a = TestDataFactory.create_perfume(supplier=self.supplier, price=Decimal('10.00'), available_quantity=10)
        self.perfume_b = TestDataFactory.create_perfume(supplier=self.supplier, price=Decimal('25.00'), available_quantity=3)

    def test_order_total_and_stock_decrement(self):
        order = services.create_standard_order(self.client_user, [(self.perfume_a.id, 2), (self.perfume_b.id, 1)])

        self.assertEqual(order.total_price, Decimal('45.00'))
        self.assertEqual(order.total_price, order.get_subtotal())
        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertFalse(order.is_custom_order)
        self.assertEqual(order.client, self.client_user)
        self.assertEqual(order.items.count(), 2)

        self.perfume_a.refresh_from_db()
        self.perfume_b.refresh_from_db()
        self.assertEqual(self.perfume_a.available_quantity, 8)
        self.assertEqual(self.perfume_b.available_quantity, 2)

    def test_unit_price_is_snapshot(self):
        order = services.create_standard_order(self.client_user, [(self.perfume_a.id, 1)])
        self.perfume_a.price = Decimal('99.00')
        self.perfume_a.save()

        item = order.items.get()
        self.assertEqual(item.unit_price, Decimal('10.00'))
        order.refresh_from_db()
        self.assertEqual(order.total_price, Decimal('10.00'))

    def test_insufficient_stock_rolls_back(self):
        with self.assertRaises(InsufficientStock) as ctx:
            services.create_standard_order(self.client_user, [(self.perfume_a.id, 1), (self.perfume_b.id, 5)])
        self.assertIn(self.perfume_b.name, ctx.exception.message)

        self.perfume_a.refresh_from_db()
        self.perfume_b.refresh_from_db()
        self.assertEqual(self.perfume_a.available_quantity, 10)
        self.assertEqual(self.perfume_b.available_quantity, 3)
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(OrderItem.objects.count(), 0)

    def test_exact_stock_allowed(self):
        services.create_standard_order(self.client_user, [(self.perfume_b.id, 3)])
        self.perfume_b.refresh_from_db()
        self.assertEqual(self.perfume_b.available_quantity, 0)

    def test_duplicate_lines_checked_cumulatively(self):
        with self.assertRaises(InsufficientStock):
            services.create_standard_order(self.client_user, [(self.perfume_b.id, 2), (self.perfume_b.id, 2)])
        self.perfume_b.refresh_from_db()
        self.assertEqual(self.perfume_b.available_quantity, 3)

        order = services.create_standard_order(self.client_user, [(self.perfume_b.id, 1), (self.perfume_b.id, 2)])
        self.assertEqual(order.items.count(), 2)
        self.assertEqual(order.total_price, Decimal('75.00'))
        self.perfume_b.refresh_from_db()
        self.assertEqual(self.perfume_b.available_quantity, 0)

    def test_unknown_perfume(self):
        with self.assertRaises(CatalogItemNotFound):
            services.create_standard_order(self.client_user, [(self.perfume_a.id, 1), (99999, 1)])
        self.perfume_a.refresh_from_db()
        self.assertEqual(self.perfume_a.available_quantity, 10)
        self.assertEqual(Order.objects.count(), 0)

    def test_non_positive_quantity(self):
        with self.assertRaises(ValidationError):
            services.create_standard_order(self.client_user, [(self.perfume_a.id, 0)])

    def test_empty_items(self):
        with self.assertRaises(ValidationError):
            services.create_standard_order(self.client_user, [])

    def test_supplier_cannot_order(self):
        with self.assertRaises(Forbidden):
            services.create_standard_order(self.supplier, [(self.perfume_a.id, 1)])


class CustomOrderServiceTests(TestCase):
    """create_custom_order"""

    def setUp(self):
        self.client_user = TestDataFactory.create_client()
        self.supplier = TestDataFactory.create_supplier()
        self.bergamot = TestDataFactory.create_component(supplier=self.supplier, available_quantity=10)
        self.musk = TestDataFactory.create_component(supplier=self.supplier, available_quantity=2)

    def test_custom_order_created_together(self):
        order = services.create_custom_order(
            self.client_user, [(self.bergamot.id, 4), (self.musk.id, 1)], notes='Less musk, more citrus'
        )
        self.assertTrue(order.is_custom_order)
        self.assertEqual(order.total_price, Decimal('0.00'))
        self.assertEqual(order.items.count(), 0)

        custom_order = CustomPerfumeOrder.objects.get(order=order)
        self.assertEqual(custom_order.price, Decimal('0.00'))
        self.assertEqual(custom_order.notes, 'Less musk, more citrus')
        self.assertEqual(custom_order.components.count(), 2)

        self.bergamot.refresh_from_db()
        self.musk.refresh_from_db()
        self.assertEqual(self.bergamot.available_quantity, 6)
        self.assertEqual(self.musk.available_quantity, 1)

    def test_insufficient_component_stock_rolls_back(self):
        with self.assertRaises(InsufficientStock):
            services.create_custom_order(self.client_user, [(self.bergamot.id, 1), (self.musk.id, 3)])
        self.bergamot.refresh_from_db()
        self.assertEqual(self.bergamot.available_quantity, 10)
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(CustomPerfumeOrder.objects.count(), 0)
        self.assertEqual(CustomPerfumeComponent.objects.count(), 0)

    def test_unknown_component(self):
        with self.assertRaises(CatalogItemNotFound):
            services.create_custom_order(self.client_user, [(424242, 1)])


class UpdateOrderStatusServiceTests(TestCase):
    """update_order_status"""

    def setUp(self):
        self.client_user = TestDataFactory.create_client()
        self.supplier_a = TestDataFactory.create_supplier()
        self.supplier_b = TestDataFactory.create_supplier()
        self.admin = TestDataFactory.create_admin()
        self.perfume_b = TestDataFactory.create_perfume(supplier=self.supplier_b)
        self.order = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume_b, 1)])

    def test_owning_supplier_advances_status(self):
        order = services.update_order_status(self.order.id, self.supplier_b, Order.STATUS_IN_PRODUCTION)
        self.assertEqual(order.status, Order.STATUS_IN_PRODUCTION)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_IN_PRODUCTION)

    def test_foreign_supplier_forbidden(self):
        with self.assertRaises(Forbidden):
            services.update_order_status(self.order.id, self.supplier_a, Order.STATUS_IN_PRODUCTION)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)

    def test_client_forbidden(self):
        with self.assertRaises(Forbidden):
            services.update_order_status(self.order.id, self.client_user, Order.STATUS_DELIVERED)

    def test_missing_order(self):
        with self.assertRaises(NotFound):
            services.update_order_status(987654, self.admin, Order.STATUS_DELIVERED)

    def test_invalid_status(self):
        with self.assertRaises(ValidationError):
            services.update_order_status(self.order.id, self.admin, 'shipped')

    def test_supplier_cannot_move_backwards(self):
        services.update_order_status(self.order.id, self.supplier_b, Order.STATUS_DELIVERED)
        with self.assertRaises(ValidationError):
            services.update_order_status(self.order.id, self.supplier_b, Order.STATUS_PENDING)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_DELIVERED)

    def test_admin_may_override_backwards(self):
        services.update_order_status(self.order.id, self.supplier_b, Order.STATUS_DELIVERED)
        order = services.update_order_status(self.order.id, self.admin, Order.STATUS_IN_PRODUCTION)
        self.assertEqual(order.status, Order.STATUS_IN_PRODUCTION)

    def test_price_ignored_for_standard_order(self):
        services.update_order_status(self.order.id, self.admin, Order.STATUS_IN_PRODUCTION, price=Decimal('1.00'))
        self.order.refresh_from_db()
        self.assertEqual(self.order.total_price, self.perfume_b.price)

    def test_custom_order_priced_by_component_supplier(self):
        component = TestDataFactory.create_component(supplier=self.supplier_a)
        order = TestDataFactory.create_custom_order(self.client_user, components=[(component, 3)])

        services.update_order_status(order.id, self.supplier_a, Order.STATUS_IN_PRODUCTION, price=Decimal('120.00'))

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_IN_PRODUCTION)
        self.assertEqual(order.total_price, Decimal('120.00'))
        self.assertEqual(CustomPerfumeOrder.objects.get(order=order).price, Decimal('120.00'))

        with self.assertRaises(Forbidden):
            services.update_order_status(order.id, self.supplier_b, Order.STATUS_DELIVERED)

    def test_negative_price_rejected(self):
        with self.assertRaises(ValidationError):
            services.update_order_status(self.order.id, self.admin, Order.STATUS_DELIVERED, price='-5')

    def test_non_finite_price_rejected(self):
        for raw in ('NaN', 'Infinity', '-Infinity', 'sNaN'):
            with self.assertRaises(ValidationError):
                services.update_order_status(self.order.id, self.admin, Order.STATUS_DELIVERED, price=raw)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)

    def test_supplier_of_one_line_updates_mixed_order(self):
        perfume_a = TestDataFactory.create_perfume(supplier=self.supplier_a)
        mixed = TestDataFactory.create_order(self.client_user, perfumes=[(perfume_a, 1), (self.perfume_b, 2)])

        order = services.update_order_status(mixed.id, self.supplier_a, Order.STATUS_IN_PRODUCTION)
        self.assertEqual(order.status, Order.STATUS_IN_PRODUCTION)

        order = services.update_order_status(mixed.id, self.supplier_b, Order.STATUS_DELIVERED)
        self.assertEqual(order.status, Order.STATUS_DELIVERED)
        mixed.refresh_from_db()
        self.assertEqual(mixed.status, Order.STATUS_DELIVERED)


class StatusPayloadTests(TestCase):

    def test_accepts_keys_and_labels(self):
        for raw, expected in [
            ('pending', Order.STATUS_PENDING),
            ('InProduction', Order.STATUS_IN_PRODUCTION),
            ('in production', Order.STATUS_IN_PRODUCTION),
            ('DELIVERED', Order.STATUS_DELIVERED),
        ]:
            serializer = OrderStatusUpdateSerializer(data={'status': raw})
            self.assertTrue(serializer.is_valid(), serializer.errors)
            self.assertEqual(serializer.validated_data['status'], expected)

    def test_rejects_unknown_status(self):
        serializer = OrderStatusUpdateSerializer(data={'status': 'Shipped'})
        self.assertFalse(serializer.is_valid())
        self.assertIn('status', serializer.errors)


class OrderAPITests(TestCase):
    """Test Order API endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client_user = TestDataFactory.create_client()
        self.other_client = TestDataFactory.create_client()
        self.supplier_a = TestDataFactory.create_supplier()
        self.supplier_b = TestDataFactory.create_supplier()
        self.admin = TestDataFactory.create_admin()
        self.perfume_a = TestDataFactory.create_perfume(supplier=self.supplier_a, price=Decimal('10.00'), available_quantity=10)
        self.perfume_b = TestDataFactory.create_perfume(supplier=self.supplier_b, price=Decimal('25.00'), available_quantity=3)

    def _place_order(self, user, lines):
        self.client.authenticate_user(user)
        return self.client.post('/api/orders/', {
            'order_items': [{'perfume_id': pid, 'quantity': qty} for pid, qty in lines]
        }, format='json')

    def test_create_order(self):
        response = self._place_order(self.client_user, [(self.perfume_a.id, 2), (self.perfume_b.id, 1)])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_price'], Decimal('45.00'))
        self.assertEqual(response.data['status'], Order.STATUS_PENDING)
        self.assertEqual(len(response.data['items']), 2)
        self.assertTrue(AuditLog.objects.filter(action='order_create', object_id=str(response.data['id'])).exists())

    def test_create_order_insufficient_stock(self):
        response = self._place_order(self.client_user, [(self.perfume_b.id, 5)])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Not enough stock', response.data['error'])
        self.perfume_b.refresh_from_db()
        self.assertEqual(self.perfume_b.available_quantity, 3)
        self.assertEqual(Order.objects.count(), 0)

    def test_create_order_unknown_perfume(self):
        response = self._place_order(self.client_user, [(55555, 1)])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('not found', response.data['error'])

    def test_create_order_without_items(self):
        self.client.authenticate_user(self.client_user)
        response = self.client.post('/api/orders/', {'order_items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_order_zero_quantity(self):
        response = self._place_order(self.client_user, [(self.perfume_a.id, 0)])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_supplier_cannot_place_order(self):
        response = self._place_order(self.supplier_a, [(self.perfume_a.id, 1)])
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_cannot_list_orders(self):
        response = self.client.get('/api/orders/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_scoped_per_role(self):
        own = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume_a, 1)])
        foreign = TestDataFactory.create_order(self.other_client, perfumes=[(self.perfume_b, 1)])
        mixed = TestDataFactory.create_order(self.other_client, perfumes=[(self.perfume_a, 1), (self.perfume_b, 1)])

        self.client.authenticate_user(self.client_user)
        response = self.client.get('/api/orders/')
        self.assertEqual([o['id'] for o in response.data], [own.id])

        self.client.authenticate_user(self.supplier_b)
        response = self.client.get('/api/orders/')
        self.assertEqual({o['id'] for o in response.data}, {foreign.id, mixed.id})

        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/orders/')
        self.assertEqual(len(response.data), 3)

    def test_list_status_filter(self):
        TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume_a, 1)])
        delivered = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume_a, 1)], status=Order.STATUS_DELIVERED)
        self.client.authenticate_user(self.client_user)
        response = self.client.get('/api/orders/', {'status': Order.STATUS_DELIVERED})
        self.assertEqual([o['id'] for o in response.data], [delivered.id])

    def test_detail_access(self):
        order = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume_b, 1)])

        self.client.authenticate_user(self.client_user)
        self.assertEqual(self.client.get(f'/api/orders/{order.id}/').status_code, status.HTTP_200_OK)

        self.client.authenticate_user(self.other_client)
        self.assertEqual(self.client.get(f'/api/orders/{order.id}/').status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(self.supplier_a)
        self.assertEqual(self.client.get(f'/api/orders/{order.id}/').status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(self.supplier_b)
        self.assertEqual(self.client.get(f'/api/orders/{order.id}/').status_code, status.HTTP_200_OK)

        self.client.authenticate_user(self.admin)
        self.assertEqual(self.client.get('/api/orders/31337/').status_code, status.HTTP_404_NOT_FOUND)

    def test_repeated_detail_reads_are_identical(self):
        response = self._place_order(self.client_user, [(self.perfume_a.id, 2), (self.perfume_b.id, 1)])
        order_id = response.data['id']

        first = self.client.get(f'/api/orders/{order_id}/')
        second = self.client.get(f'/api/orders/{order_id}/')
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data, second.data)
        self.assertEqual(first.content, second.content)

        self.perfume_a.refresh_from_db()
        self.assertEqual(self.perfume_a.available_quantity, 8)

    def test_supplier_of_one_line_updates_mixed_order(self):
        mixed = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume_a, 1), (self.perfume_b, 1)])
        self.client.authenticate_user(self.supplier_a)
        response = self.client.put(f'/api/orders/{mixed.id}/status/', {'status': 'in_production'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        mixed.refresh_from_db()
        self.assertEqual(mixed.status, Order.STATUS_IN_PRODUCTION)

    def test_order_detail_after_perfume_deleted(self):
        order = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume_a, 2)])
        self.perfume_a.delete()
        self.client.authenticate_user(self.client_user)
        response = self.client.get(f'/api/orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['items'][0]['perfume_name'])
        self.assertEqual(response.data['items'][0]['line_total'], Decimal('20.00'))

    def test_update_status_by_supplier(self):
        order = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume_b, 1)])
        self.client.authenticate_user(self.supplier_b)
        response = self.client.put(f'/api/orders/{order.id}/status/', {'status': 'InProduction'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_IN_PRODUCTION)
        self.assertTrue(AuditLog.objects.filter(action='order_status', object_id=str(order.id)).exists())

    def test_update_status_foreign_supplier(self):
        order = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume_b, 1)])
        self.client.authenticate_user(self.supplier_a)
        response = self.client.put(f'/api/orders/{order.id}/status/', {'status': 'delivered'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_PENDING)

    def test_update_status_by_client_forbidden(self):
        order = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume_b, 1)])
        self.client.authenticate_user(self.client_user)
        response = self.client.put(f'/api/orders/{order.id}/status/', {'status': 'delivered'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_status_missing_order(self):
        self.client.authenticate_user(self.admin)
        response = self.client.put('/api/orders/77777/status/', {'status': 'delivered'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_status_invalid_value(self):
        order = TestDataFactory.create_order(self.client_user, perfumes=[(self.perfume_b, 1)])
        self.client.authenticate_user(self.admin)
        response = self.client.put(f'/api/orders/{order.id}/status/', {'status': 'lost'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class CustomOrderAPITests(TestCase):
    """Test custom blend endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client_user = TestDataFactory.create_client()
        self.supplier = TestDataFactory.create_supplier()
        self.component = TestDataFactory.create_component(supplier=self.supplier, name='Neroli', available_quantity=5)

    def test_create_and_price_custom_order(self):
        self.client.authenticate_user(self.client_user)
        response = self.client.post('/api/orders/custom/', {
            'components': [{'component_id': self.component.id, 'quantity': 2}],
            'notes': 'Light and floral',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order_id = response.data['order_id']
        self.assertEqual(response.data['price'], Decimal('0.00'))
        self.assertEqual(response.data['notes'], 'Light and floral')
        self.assertEqual(response.data['components'][0]['component_name'], 'Neroli')
        self.assertTrue(response.data['order']['is_custom_order'])

        self.component.refresh_from_db()
        self.assertEqual(self.component.available_quantity, 3)

        self.client.authenticate_user(self.supplier)
        response = self.client.put(f'/api/orders/{order_id}/status/', {
            'status': 'in_production', 'price': '85.00'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        response = self.client.get(f'/api/orders/custom/{order_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['price'], Decimal('85.00'))
        self.assertEqual(response.data['order']['total_price'], Decimal('85.00'))

    def test_supplier_sees_custom_order_in_list(self):
        order = TestDataFactory.create_custom_order(self.client_user, components=[(self.component, 1)])
        self.client.authenticate_user(self.supplier)
        response = self.client.get('/api/orders/', {'is_custom_order': 'true'})
        self.assertEqual([o['id'] for o in response.data], [order.id])

    def test_custom_order_insufficient_stock(self):
        self.client.authenticate_user(self.client_user)
        response = self.client.post('/api/orders/custom/', {
            'components': [{'component_id': self.component.id, 'quantity': 6}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(CustomPerfumeOrder.objects.count(), 0)

    def test_supplier_cannot_create_custom_order(self):
        self.client.authenticate_user(self.supplier)
        response = self.client.post('/api/orders/custom/', {
            'components': [{'component_id': self.component.id, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_custom_detail_of_standard_order(self):
        perfume = TestDataFactory.create_perfume()
        order = TestDataFactory.create_order(self.client_user, perfumes=[(perfume, 1)])
        self.client.authenticate_user(self.client_user)
        response = self.client.get(f'/api/orders/custom/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_custom_detail_other_client(self):
        order = TestDataFactory.create_custom_order(self.client_user, components=[(self.component, 1)])
        self.client.authenticate_user(TestDataFactory.create_client())
        response = self.client.get(f'/api/orders/custom/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
