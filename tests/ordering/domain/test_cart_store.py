"""Tests for the two-tier CartStore."""

import structlog
from ordering.cart.local_storage import InMemoryCartStorage
from ordering.cart.remote import RemoteCart
from ordering.cart.store import CartStore


class RecordingRemoteCart(RemoteCart):
    """In-memory remote cart that records every call."""

    def __init__(self, items=None, fail=False):
        self.items = [dict(i) for i in items or []]
        self.fail = fail
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if self.fail:
            raise ConnectionError("remote unavailable")

    def load(self, customer_id):
        self._record("load", customer_id)
        return [dict(i) for i in self.items]

    def add(self, customer_id, item, quantity):
        self._record("add", customer_id, item["product_id"], quantity)

    def set_quantity(self, customer_id, product_id, quantity):
        self._record("set_quantity", customer_id, product_id, quantity)

    def remove(self, customer_id, product_id):
        self._record("remove", customer_id, product_id)

    def clear(self, customer_id):
        self._record("clear", customer_id)

    def replace(self, customer_id, items):
        self._record("replace", customer_id, items)
        self.items = [dict(i) for i in items]

    def names(self):
        return [call[0] for call in self.calls]


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def _store(local=None, remote=None, clock=None):
    return CartStore(
        InMemoryCartStorage(local),
        remote or RecordingRemoteCart(),
        clock=clock or FakeClock(),
    )


class TestAnonymousCart:
    def test_add_lines_and_totals(self):
        store = _store()
        store.add("p1", 120.0, label="5kg")
        store.add("p2", 240.0, label="10kg", qty=2)

        assert store.total_items == 3
        assert store.total_amount == 600.0

    def test_add_existing_line_increments_by_one(self):
        store = _store()
        store.add("p1", 120.0, qty=2)
        store.add("p1", 120.0, qty=5)

        assert store.items[0].quantity == 3

    def test_mutations_stay_local_until_sign_in(self):
        remote = RecordingRemoteCart()
        store = _store(remote=remote)
        store.add("p1", 120.0)
        store.update_quantity("p1", 3)
        store.remove("p1")

        assert remote.calls == []

    def test_local_storage_written_on_every_mutation(self):
        storage = InMemoryCartStorage()
        store = CartStore(storage, RecordingRemoteCart())
        store.add("p1", 120.0)
        assert storage.load()[0]["product_id"] == "p1"

        store.remove("p1")
        assert storage.load() == []

    def test_update_quantity_to_zero_removes_line(self):
        store = _store()
        store.add("p1", 120.0)
        store.update_quantity("p1", 0)
        assert store.items == []

    def test_add_new_line_with_non_positive_quantity_is_ignored(self):
        store = _store()
        store.add("p1", 10.0, qty=0)
        store.add("p2", 10.0, qty=-3)

        assert store.items == []
        assert store.total_items == 0
        assert store.total_amount == 0

    def test_items_is_a_snapshot(self):
        store = _store()
        store.add("p1", 120.0)
        store.items[0].quantity = 99
        assert store.items[0].quantity == 1

    def test_restores_lines_from_local_storage(self):
        store = _store(local=[{"product_id": "p1", "unit_price": 50.0, "quantity": 2}])
        assert store.total_amount == 100.0


class TestSignInReconciliation:
    def test_non_empty_local_cart_replaces_remote(self):
        remote = RecordingRemoteCart(items=[{"product_id": "old", "unit_price": 10.0, "quantity": 1}])
        store = _store(remote=remote)
        store.add("p1", 120.0)

        store.sign_in("cust-001")

        assert remote.names() == ["replace"]
        assert [i["product_id"] for i in remote.items] == ["p1"]
        assert [line.product_id for line in store.items] == ["p1"]

    def test_empty_local_cart_adopts_remote(self):
        remote = RecordingRemoteCart(items=[{"product_id": "p9", "unit_price": 75.0, "quantity": 2}])
        storage = InMemoryCartStorage()
        store = CartStore(storage, remote, clock=FakeClock())

        store.sign_in("cust-001")

        assert remote.names() == ["load"]
        assert store.total_amount == 150.0
        assert storage.load()[0]["product_id"] == "p9"

    def test_reconciliation_throttled_within_interval(self):
        clock = FakeClock()
        remote = RecordingRemoteCart()
        store = _store(remote=remote, clock=clock)
        store.add("p1", 120.0)

        store.sign_in("cust-001")
        clock.now += 0.5
        store.sign_in("cust-001")

        assert remote.names().count("replace") == 1

    def test_reconciliation_runs_again_after_interval(self):
        clock = FakeClock()
        remote = RecordingRemoteCart()
        store = _store(remote=remote, clock=clock)
        store.add("p1", 120.0)

        store.sign_in("cust-001")
        clock.now += 2
        store.sign_in("cust-001")

        assert remote.names().count("replace") == 2


class TestSignedInMutations:
    def _signed_in(self, remote):
        store = _store(remote=remote)
        store.sign_in("cust-001")
        remote.calls.clear()
        return store

    def test_add_mirrors_delta_to_remote(self):
        remote = RecordingRemoteCart()
        store = self._signed_in(remote)

        store.add("p1", 120.0, qty=2)
        store.add("p1", 120.0)

        assert remote.calls == [("add", "cust-001", "p1", 2), ("add", "cust-001", "p1", 1)]

    def test_ignored_add_is_not_mirrored(self):
        remote = RecordingRemoteCart()
        store = self._signed_in(remote)

        store.add("p1", 120.0, qty=0)

        assert remote.calls == []

    def test_quantity_and_removal_mirrored(self):
        remote = RecordingRemoteCart()
        store = self._signed_in(remote)
        store.add("p1", 120.0)

        store.update_quantity("p1", 4)
        store.remove("p1")

        assert remote.names() == ["add", "set_quantity", "remove"]

    def test_clear_clears_remote(self):
        remote = RecordingRemoteCart()
        store = self._signed_in(remote)
        store.add("p1", 120.0)

        store.clear()

        assert store.items == []
        assert remote.names()[-1] == "clear"

    def test_clear_on_order_success_leaves_remote_alone(self):
        remote = RecordingRemoteCart()
        store = self._signed_in(remote)
        store.add("p1", 120.0)
        remote.calls.clear()

        store.clear_on_order_success()

        assert store.items == []
        assert remote.calls == []

    def test_sign_out_stops_mirroring(self):
        remote = RecordingRemoteCart()
        store = self._signed_in(remote)
        store.sign_out()

        store.add("p1", 120.0)

        assert not store.is_authenticated
        assert remote.calls == []


class TestRemoteFailures:
    def test_remote_failure_does_not_fail_local_mutation(self):
        remote = RecordingRemoteCart()
        store = _store(remote=remote)
        store.sign_in("cust-001")
        remote.fail = True

        with structlog.testing.capture_logs() as logs:
            store.add("p1", 120.0)

        assert store.total_items == 1
        assert any(log["event"] == "Remote cart update failed" for log in logs)

    def test_failed_remote_load_keeps_local_cart_empty(self):
        remote = RecordingRemoteCart(fail=True)
        store = _store(remote=remote)

        with structlog.testing.capture_logs() as logs:
            store.sign_in("cust-001")

        assert store.items == []
        assert any(log["event"] == "Failed to load remote cart" for log in logs)
