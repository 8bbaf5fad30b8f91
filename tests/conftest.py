import itertools

import pytest

from domain.models import CartLine, Customer, Product


class FakeResponse:
    def __init__(self, data=None, count=None, error=None):
        self.data = data
        self.count = count
        self.error = error


class FakeQuery:
    """
    Records one query-builder chain: table, operation, payload and filters.
    """

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.op = None
        self.payload = None
        self.options = {}
        self.filters = []

    def select(self, *columns, count=None, head=None):
        self.op = "select"
        self.payload = columns
        self.options = {"count": count, "head": head}
        return self

    def insert(self, rows):
        self.op = "insert"
        self.payload = rows
        return self

    def update(self, values):
        self.op = "update"
        self.payload = values
        return self

    def upsert(self, rows, on_conflict=None):
        self.op = "upsert"
        self.payload = rows
        self.options = {"on_conflict": on_conflict}
        return self

    def _filter(self, name, column, value):
        self.filters.append((name, column, value))
        return self

    def eq(self, column, value):
        return self._filter("eq", column, value)

    def gt(self, column, value):
        return self._filter("gt", column, value)

    def gte(self, column, value):
        return self._filter("gte", column, value)

    def lt(self, column, value):
        return self._filter("lt", column, value)

    def limit(self, n):
        self.filters.append(("limit", None, n))
        return self

    def execute(self):
        self.client.calls.append(self)
        return self.client.respond(self)


class FakeSupabase:
    """
    Stand-in for the supabase Client.

    `responses[(table, op)]` is a FakeResponse or a callable taking the query.
    `errors[(table, op)]` is an exception, or a callable returning one (or None).
    Inserts without a configured response echo the payload with generated ids.
    """

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.errors = {}
        self.schemas = []
        self._ids = itertools.count(1)

    def schema(self, name):
        self.schemas.append(name)
        return self

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, fn, params=None):
        query = FakeQuery(self, fn)
        query.op = "rpc"
        query.payload = params
        return query

    def respond(self, query):
        key = (query.table, query.op)

        error = self.errors.get(key)
        if callable(error) and not isinstance(error, Exception):
            error = error(query)
        if error is not None:
            raise error

        resp = self.responses.get(key)
        if callable(resp):
            resp = resp(query)
        if resp is not None:
            return resp

        if query.op == "insert":
            rows = query.payload if isinstance(query.payload, list) else [query.payload]
            return FakeResponse([{**row, "id": f"gen-{next(self._ids)}"} for row in rows])
        return FakeResponse([])

    def calls_for(self, table, op=None):
        return [q for q in self.calls if q.table == table and (op is None or q.op == op)]


@pytest.fixture
def fake_client():
    return FakeSupabase()


@pytest.fixture
def make_product():
    def _make(id="p1", name="Milk", price=25.0, stock_quantity=10, barcode=None, min_stock_level=0):
        return Product(
            id=id,
            name=name,
            price=price,
            stock_quantity=stock_quantity,
            barcode=barcode,
            min_stock_level=min_stock_level,
        )

    return _make


@pytest.fixture
def make_customer():
    def _make(id="c1", name="Wanjiru", phone="0700000000", loyalty_points=0, is_student=False, total_spent=0.0):
        return Customer(
            id=id,
            name=name,
            phone=phone,
            loyalty_points=loyalty_points,
            is_student=is_student,
            total_spent=total_spent,
        )

    return _make


@pytest.fixture
def cart_of_100(make_product):
    """A cart whose subtotal is exactly 100."""
    bread = make_product(id="p1", name="Bread", price=25.0, stock_quantity=10)
    sugar = make_product(id="p2", name="Sugar", price=50.0, stock_quantity=3)
    return [CartLine.from_product(bread, 2), CartLine.from_product(sugar, 1)]
