"""
Unit tests for OrderRepository

These tests validate repository logic without requiring a database connection.
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from app.domain.order import NewOrderLine, Order, OrderCreate, OrderStatus, Payment
from app.repositories.order_repository import OrderRepository

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def order_row(**overrides):
    row = {
        'id': 'c0ffee00-0000-4000-8000-000000000001',
        'user_id': 1,
        'gateway_order_id': 'order_gw1',
        'amount': 50000,
        'currency': 'INR',
        'status': 'created',
        'address_snapshot': '12 MG Road, Pune',
        'created_at': NOW,
        'completed_at': None,
    }
    row.update(overrides)
    return row


@pytest.fixture
def mock_db():
    """Database whose transaction() yields a MagicMock cursor"""
    db = MagicMock()
    cursor = MagicMock()
    db.transaction.return_value.__enter__.return_value = cursor
    return db, cursor


class TestOrderRepository:
    """Test OrderRepository methods"""

    def test_create_inserts_order_and_lines_in_one_transaction(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.side_effect = [
            order_row(),
            {'id': 10, 'order_id': order_row()['id'], 'item_id': 'A', 'size': 'M', 'position': 0, 'unit_price': 500},
            {'id': 11, 'order_id': order_row()['id'], 'item_id': 'B', 'size': 'L', 'position': 1, 'unit_price': 1250},
        ]

        repo = OrderRepository(db)
        order = repo.create(OrderCreate(
            user_id=1,
            gateway_order_id='order_gw1',
            amount=175000,
            currency='INR',
            address_snapshot='12 MG Road, Pune',
            lines=[
                NewOrderLine(item_id='A', size='M', unit_price=500),
                NewOrderLine(item_id='B', size='L', unit_price=1250),
            ],
        ))

        assert isinstance(order, Order)
        assert order.status == OrderStatus.CREATED
        assert [line.item_id for line in order.lines] == ['A', 'B']
        db.transaction.assert_called_once()
        assert cursor.execute.call_count == 3

        insert_params = cursor.execute.call_args_list[0].args[1]
        assert insert_params[1:6] == (1, 'order_gw1', 175000, 'INR', 'created')

        line_params = cursor.execute.call_args_list[2].args[1]
        assert line_params[1:] == ('B', 'L', 1, 1250)

    def test_record_payment_inserts_when_order_was_created(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.side_effect = [
            {'id': 'ord-1'},
            {'id': 1, 'order_id': 'ord-1', 'gateway_payment_id': 'pay_1', 'signature': 'abc', 'created_at': NOW},
        ]

        repo = OrderRepository(db)
        payment = repo.record_payment('ord-1', 'pay_1', 'abc', NOW)

        assert isinstance(payment, Payment)
        assert payment.gateway_payment_id == 'pay_1'
        db.transaction.assert_called_once()

        update_sql, update_params = cursor.execute.call_args_list[0].args
        assert "status = %s" in update_sql and "AND status = %s" in update_sql
        assert update_params == ('paid', NOW, 'ord-1', 'created')
        assert "INSERT INTO payments" in cursor.execute.call_args_list[1].args[0]

    def test_record_payment_is_noop_when_already_paid(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.return_value = None

        repo = OrderRepository(db)

        assert repo.record_payment('ord-1', 'pay_1', 'abc', NOW) is None
        cursor.execute.assert_called_once()

    def test_transition_status_compare_and_set(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.return_value = {'id': 'ord-1'}

        repo = OrderRepository(db)

        assert repo.transition_status('ord-1', OrderStatus.PAID, OrderStatus.DELIVERED) is True
        assert cursor.execute.call_args.args[1] == ('delivered', 'ord-1', 'paid')

    def test_transition_status_lost(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.return_value = None

        assert OrderRepository(db).transition_status('ord-1', OrderStatus.PAID, OrderStatus.DELIVERED) is False

    def test_transition_status_rejects_illegal_transition(self, mock_db):
        db, cursor = mock_db

        with pytest.raises(ValueError):
            OrderRepository(db).transition_status('ord-1', OrderStatus.DELIVERED, OrderStatus.PAID)

        cursor.execute.assert_not_called()

    def test_find_by_gateway_order_id_returns_none_when_not_found(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.return_value = None

        assert OrderRepository(db).find_by_gateway_order_id('order_unknown') is None

    def test_find_by_id_attaches_lines_and_payment(self, mock_db):
        db, cursor = mock_db
        row = order_row(status='paid', completed_at=NOW)
        cursor.fetchone.return_value = row
        cursor.fetchall.side_effect = [
            [{'id': 10, 'order_id': row['id'], 'item_id': 'A', 'size': 'M', 'position': 0,
              'unit_price': 500, 'item_name': 'Linen Dress'}],
            [{'id': 1, 'order_id': row['id'], 'gateway_payment_id': 'pay_1', 'signature': 'abc',
              'created_at': NOW}],
        ]

        order = OrderRepository(db).find_by_id(row['id'])

        assert order.status == OrderStatus.PAID
        assert order.lines[0].item_name == 'Linen Dress'
        assert order.payment.gateway_payment_id == 'pay_1'
        assert order.to_dict()['isDelivered'] is False

    def test_find_all_includes_user(self, mock_db):
        db, cursor = mock_db
        row = order_row(status='delivered', completed_at=NOW)
        row.update({'user_name': 'Ana', 'user_email': 'ana@example.com',
                    'user_address': '12 MG Road, Pune', 'user_role': 'CUSTOMER'})
        cursor.fetchall.side_effect = [[row], [], []]

        orders = OrderRepository(db).find_all()

        assert len(orders) == 1
        assert orders[0].user.email == 'ana@example.com'
        assert orders[0].to_dict()['isDelivered'] is True
        statuses_param = cursor.execute.call_args_list[0].args[1][0]
        assert statuses_param == ['paid', 'delivered']
