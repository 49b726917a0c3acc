import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api import admin_router, cart_router, delivery_router, order_router, payment_router
from shared.api import register_exception_handlers


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("ADMIN_EMAILS", "admin@pureplatterfoods.com")

    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(admin_router)
    app.include_router(delivery_router)
    app.include_router(payment_router)
    register_exception_handlers(app)
    return TestClient(app)
