"""
Pytest fixtures and configuration for the checkout backend tests

Provides in-memory stand-ins for the repositories and a Razorpay connector
wired to an httpx mock transport, so unit tests need no PostgreSQL or network.
Integration tests use `database_url` and are skipped when DATABASE_URL is unset.
"""
import itertools
import os
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

import httpx
import pytest

from app.connectors.razorpay_connector import RazorpayConnector, compute_payment_signature
from app.core.errors import ItemNotFound
from app.domain.order import (
    COMPLETED_STATUSES,
    NewOrderLine,
    Order,
    OrderCreate,
    OrderLine,
    OrderStatus,
    Payment,
)
from app.domain.user import Role, User

GATEWAY_SECRET = "test_secret"


class InMemoryCatalog:
    """Catalog store keyed by item ID"""

    def __init__(self, prices: Dict[str, int]):
        self.prices = dict(prices)
        self.lookups = 0

    def lookup_prices(self, item_ids):
        self.lookups += 1
        requested = {str(item_id) for item_id in item_ids}
        missing = requested - self.prices.keys()
        if missing:
            raise ItemNotFound(missing)
        return {item_id: self.prices[item_id] for item_id in requested}


class InMemoryUsers:
    def __init__(self, users: List[User]):
        self.users = {user.id: user for user in users}

    def find_by_id(self, user_id):
        user = self.users.get(user_id)
        return user.model_copy() if user else None


class InMemoryOrders:
    """
    Order store with the same compare-and-set semantics as OrderRepository

    A lock stands in for the row lock the conditional UPDATE takes.
    """

    def __init__(self):
        self.orders: Dict[str, Order] = {}
        self.payments: List[Payment] = []
        self.fail_on_create = False
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    def create(self, new_order: OrderCreate) -> Order:
        if self.fail_on_create:
            raise RuntimeError("connection reset")
        order_id = f"ord-{next(self._ids)}"
        order = Order(
            id=order_id,
            user_id=new_order.user_id,
            gateway_order_id=new_order.gateway_order_id,
            amount=new_order.amount,
            currency=new_order.currency,
            status=OrderStatus.CREATED,
            address_snapshot=new_order.address_snapshot,
            created_at=datetime.now(timezone.utc),
            lines=[
                OrderLine(id=position + 1, order_id=order_id, position=position, **line.model_dump())
                for position, line in enumerate(new_order.lines)
            ],
        )
        self.orders[order_id] = order
        return order.model_copy(deep=True)

    def record_payment(self, order_id, gateway_payment_id, signature, completed_at) -> Optional[Payment]:
        with self._lock:
            order = self.orders[order_id]
            if order.status != OrderStatus.CREATED:
                return None
            payment = Payment(
                id=len(self.payments) + 1,
                order_id=order_id,
                gateway_payment_id=gateway_payment_id,
                signature=signature,
                created_at=completed_at,
            )
            self.payments.append(payment)
            self.orders[order_id] = order.model_copy(
                update={"status": OrderStatus.PAID, "completed_at": completed_at, "payment": payment}
            )
            return payment

    def transition_status(self, order_id, from_status, to_status) -> bool:
        if not from_status.can_transition_to(to_status):
            raise ValueError(f"Illegal status transition {from_status.value} -> {to_status.value}")
        with self._lock:
            order = self.orders.get(order_id)
            if order is None or order.status != from_status:
                return False
            self.orders[order_id] = order.model_copy(update={"status": to_status})
            return True

    def find_by_id(self, order_id):
        order = self.orders.get(order_id)
        return order.model_copy(deep=True) if order else None

    def find_by_gateway_order_id(self, gateway_order_id):
        for order in self.orders.values():
            if order.gateway_order_id == gateway_order_id:
                return order.model_copy(deep=True)
        return None

    def find_completed_by_user(self, user_id):
        return [
            order for order in self.orders.values()
            if order.user_id == user_id and order.status in COMPLETED_STATUSES
        ]

    def find_all(self, statuses=COMPLETED_STATUSES):
        return [order for order in self.orders.values() if order.status in statuses]

    def payments_for(self, order_id) -> List[Payment]:
        return [payment for payment in self.payments if payment.order_id == order_id]


class GatewayStub:
    """httpx transport handler emulating the Razorpay Orders API"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.failure: Optional[Exception] = None
        self.status_code = 200
        self._ids = itertools.count(1)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.failure is not None:
            raise self.failure
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": {"code": "SERVER_ERROR"}})
        return httpx.Response(200, json={"id": f"order_gw{next(self._ids)}", "status": "created"})


@pytest.fixture
def sample_users():
    return [
        User(id=1, name="Ana", email="ana@example.com", address="12 MG Road, Pune", role=Role.CUSTOMER),
        User(id=2, name="Ravi", email="ravi@example.com", address="HQ", role=Role.ADMIN),
    ]


@pytest.fixture
def catalog():
    return InMemoryCatalog({"A": 500, "B": 1250})


@pytest.fixture
def users(sample_users):
    return InMemoryUsers(sample_users)


@pytest.fixture
def orders():
    return InMemoryOrders()


@pytest.fixture
def gateway_stub():
    return GatewayStub()


@pytest.fixture
def gateway(gateway_stub):
    client = httpx.AsyncClient(transport=httpx.MockTransport(gateway_stub))
    return RazorpayConnector(
        key_id="rzp_test_key",
        key_secret=GATEWAY_SECRET,
        client=client,
        api_url="https://gateway.test/v1",
    )


@pytest.fixture
def sign():
    """Signature the gateway would produce for an order/payment pair"""
    def _sign(gateway_order_id: str, gateway_payment_id: str) -> str:
        return compute_payment_signature(GATEWAY_SECRET, gateway_order_id, gateway_payment_id)
    return _sign


@pytest.fixture
def created_order(orders):
    """An order awaiting payment: one item A (500) paid in INR sub-units"""
    return orders.create(OrderCreate(
        user_id=1,
        gateway_order_id="order_DBJOWzybf0sJbb",
        amount=50000,
        currency="INR",
        address_snapshot="12 MG Road, Pune",
        lines=[NewOrderLine(item_id="A", size="M", unit_price=500)],
    ))


@pytest.fixture(scope="session")
def database_url():
    """
    Provides the database URL for integration tests

    Scope: session (created once per test session)
    """
    url = os.getenv("DATABASE_URL")
    if not url:
        pytest.skip("DATABASE_URL not configured")
    return url
