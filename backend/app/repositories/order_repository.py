"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders, order lines and payments and
returns Order domain models. The two writes that must be atomic
(order + lines, payment + status flip) each run in one transaction.
"""
import logging
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from app.core.database import Database
from app.domain.order import (
    COMPLETED_STATUSES,
    Order,
    OrderCreate,
    OrderLine,
    OrderStatus,
    Payment,
)
from app.domain.user import User

logger = logging.getLogger(__name__)


ORDER_COLUMNS = """
    o.id, o.user_id, o.gateway_order_id, o.amount, o.currency, o.status,
    o.address_snapshot, o.created_at, o.completed_at
"""


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    """

    def __init__(self, db: Database):
        self.db = db

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, new_order: OrderCreate) -> Order:
        """
        Persist an order in `created` state together with its lines

        Args:
            new_order: Server-computed order values

        Returns:
            The persisted Order with lines
        """
        order_id = str(uuid.uuid4())

        with self.db.transaction() as cursor:
            cursor.execute("""
                INSERT INTO orders (
                    id, user_id, gateway_order_id, amount, currency,
                    status, address_snapshot
                ) VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING id, user_id, gateway_order_id, amount, currency, status,
                    address_snapshot, created_at, completed_at
            """, (
                order_id,
                new_order.user_id,
                new_order.gateway_order_id,
                new_order.amount,
                new_order.currency,
                OrderStatus.CREATED.value,
                new_order.address_snapshot,
            ))
            order_row = dict(cursor.fetchone())

            lines = []
            for position, line in enumerate(new_order.lines):
                cursor.execute("""
                    INSERT INTO order_lines (order_id, item_id, size, position, unit_price)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING id, order_id, item_id, size, position, unit_price
                """, (order_id, line.item_id, line.size, position, line.unit_price))
                lines.append(OrderLine(**cursor.fetchone()))

        order_row['lines'] = lines
        return Order(**order_row)

    def record_payment(
        self,
        order_id: str,
        gateway_payment_id: str,
        signature: str,
        completed_at: datetime,
    ) -> Optional[Payment]:
        """
        Flip a created order to paid and store its payment receipt

        The conditional UPDATE takes the row lock, so concurrent calls for
        the same order are serialized and only one of them sees the row
        still in `created`.

        Returns:
            The new Payment, or None when the order was no longer `created`
            (already paid by an earlier call), in which case nothing is written.
        """
        with self.db.transaction() as cursor:
            cursor.execute("""
                UPDATE orders
                SET status = %s, completed_at = %s
                WHERE id = %s AND status = %s
                RETURNING id
            """, (OrderStatus.PAID.value, completed_at, order_id, OrderStatus.CREATED.value))

            if cursor.fetchone() is None:
                return None

            cursor.execute("""
                INSERT INTO payments (order_id, gateway_payment_id, signature)
                VALUES (%s, %s, %s)
                RETURNING id, order_id, gateway_payment_id, signature, created_at
            """, (order_id, gateway_payment_id, signature))

            return Payment(**cursor.fetchone())

    def transition_status(self, order_id: str, from_status: OrderStatus, to_status: OrderStatus) -> bool:
        """
        Compare-and-set the order status

        Returns:
            True if the row was in `from_status` and now is in `to_status`
        """
        if not from_status.can_transition_to(to_status):
            raise ValueError(f"Illegal status transition {from_status.value} -> {to_status.value}")

        with self.db.transaction() as cursor:
            cursor.execute("""
                UPDATE orders SET status = %s
                WHERE id = %s AND status = %s
                RETURNING id
            """, (to_status.value, order_id, from_status.value))
            return cursor.fetchone() is not None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_by_id(self, order_id: str) -> Optional[Order]:
        """Find order by ID with lines and payment"""
        return self._find_one("o.id = %s", order_id)

    def find_by_gateway_order_id(self, gateway_order_id: str) -> Optional[Order]:
        """Find order by the payment gateway's order ID"""
        return self._find_one("o.gateway_order_id = %s", gateway_order_id)

    def find_completed_by_user(self, user_id: int) -> List[Order]:
        """Paid and delivered orders of one user, newest first"""
        with self.db.transaction() as cursor:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders o
                WHERE o.user_id = %s AND o.status = ANY(%s)
                ORDER BY o.completed_at DESC
            """, (user_id, [s.value for s in COMPLETED_STATUSES]))
            rows = cursor.fetchall()
            return self._hydrate(cursor, rows)

    def find_all(self, statuses: Iterable[OrderStatus] = COMPLETED_STATUSES) -> List[Order]:
        """
        Orders in the given statuses with owning user, lines and payment

        Args:
            statuses: Statuses to include (default: paid and delivered)
        """
        with self.db.transaction() as cursor:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS},
                    u.name AS user_name,
                    u.email AS user_email,
                    u.address AS user_address,
                    u.role AS user_role
                FROM orders o
                JOIN users u ON u.id = o.user_id
                WHERE o.status = ANY(%s)
                ORDER BY o.created_at DESC
            """, ([s.value for s in statuses],))
            rows = cursor.fetchall()
            return self._hydrate(cursor, rows, with_user=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find_one(self, condition: str, value) -> Optional[Order]:
        with self.db.transaction() as cursor:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders o
                WHERE {condition}
            """, (value,))
            row = cursor.fetchone()
            if not row:
                return None
            return self._hydrate(cursor, [row])[0]

    def _hydrate(self, cursor, rows, with_user: bool = False) -> List[Order]:
        """Attach lines and payments to order rows (one query each)"""
        if not rows:
            return []

        order_ids = [row['id'] for row in rows]
        lines = self._load_lines(cursor, order_ids)
        payments = self._load_payments(cursor, order_ids)

        orders = []
        for row in rows:
            data = dict(row)
            if with_user:
                data['user'] = User(
                    id=data['user_id'],
                    name=data.pop('user_name', None),
                    email=data.pop('user_email', None),
                    address=data.pop('user_address', None),
                    role=data.pop('user_role'),
                )
            data['lines'] = lines.get(data['id'], [])
            data['payment'] = payments.get(data['id'])
            orders.append(Order(**data))
        return orders

    def _load_lines(self, cursor, order_ids: List[str]) -> Dict[str, List[OrderLine]]:
        cursor.execute("""
            SELECT
                ol.id, ol.order_id, ol.item_id, ol.size, ol.position, ol.unit_price,
                ci.name AS item_name
            FROM order_lines ol
            LEFT JOIN catalog_items ci ON ci.id = ol.item_id
            WHERE ol.order_id = ANY(%s)
            ORDER BY ol.order_id, ol.position
        """, (order_ids,))

        lines_by_order: Dict[str, List[OrderLine]] = {}
        for row in cursor.fetchall():
            lines_by_order.setdefault(row['order_id'], []).append(OrderLine(**row))
        return lines_by_order

    def _load_payments(self, cursor, order_ids: List[str]) -> Dict[str, Payment]:
        cursor.execute("""
            SELECT id, order_id, gateway_payment_id, signature, created_at
            FROM payments
            WHERE order_id = ANY(%s)
        """, (order_ids,))
        return {row['order_id']: Payment(**row) for row in cursor.fetchall()}
