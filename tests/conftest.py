import os

# Avant l'import de l'app: pas de ping Supabase ni de Redis en tests
os.environ.setdefault("STARTUP_DB_CHECK", "0")
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import copy
import uuid
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from plantnet.app import app as fastapi_app
from plantnet.auth.service import IdentityVerifier
from plantnet.dependencies import (
    get_identity_verifier,
    get_order_repository,
    get_payment_gateway,
    get_plant_repository,
)
from plantnet.errors import (
    Conflict,
    GatewayError,
    InsufficientStock,
    NotFound,
    Unauthorized,
    ValidationError,
)
from plantnet.payments.stripe_client import CheckoutSession, StripeGateway, to_minor_units
from plantnet.plants.models import PlantCreate
from plantnet.plants.repository import _check_id

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


# --- Faux collaborateurs en mémoire (même contrat que les implémentations Supabase/Stripe) ---

class FakePlantRepository:
    def __init__(self):
        self.rows: Dict[str, dict] = {}
        self.decrements: List[str] = []

    def create(self, data: Dict[str, Any]) -> str:
        if not data:
            raise ValidationError("Plants data required!!!")
        try:
            plant = PlantCreate.model_validate(data)
        except Exception as e:
            raise ValidationError("Invalid plants data", error=str(e))
        pid = str(uuid.uuid4())
        self.rows[pid] = {"id": pid, **plant.model_dump()}
        return pid

    def list_all(self) -> List[dict]:
        return [copy.deepcopy(r) for r in self.rows.values()]

    def get_by_id(self, plant_id: Any) -> dict:
        pid = _check_id(plant_id)
        if pid not in self.rows:
            raise NotFound("Plant not found")
        return copy.deepcopy(self.rows[pid])

    def decrement_quantity(self, plant_id: Any, by: int = 1) -> int:
        pid = _check_id(plant_id)
        row = self.rows.get(pid)
        if row is None or row["quantity"] < by:
            raise InsufficientStock()
        row["quantity"] -= by
        self.decrements.append(pid)
        return row["quantity"]


class FakeOrderRepository:
    def __init__(self):
        self.rows: List[dict] = []

    def find_by_transaction_id(self, transaction_id: str) -> Optional[dict]:
        return next((copy.deepcopy(r) for r in self.rows if r["transactionId"] == transaction_id), None)

    def find_by_customer_email(self, email: str) -> List[dict]:
        return [copy.deepcopy(r) for r in self.rows if r.get("customer_email") == email]

    def find_by_seller_email(self, email: str) -> List[dict]:
        return [copy.deepcopy(r) for r in self.rows if (r.get("seller") or {}).get("email") == email]

    def insert(self, order: Dict[str, Any]) -> str:
        # contrainte UNIQUE sur transactionId
        if any(r["transactionId"] == order["transactionId"] for r in self.rows):
            raise Conflict("Order already exists")
        oid = str(uuid.uuid4())
        self.rows.append({**copy.deepcopy(order), "id": oid})
        return oid


class FakeStripeGateway(StripeGateway):
    """Passerelle Stripe simulée: garde les sessions créées, complétables en test."""

    def __init__(self):
        super().__init__(client_domain="http://client.test")
        self.sessions: Dict[str, dict] = {}

    def create_session(self, price_info: Dict[str, Any]) -> Dict[str, str]:
        unit_amount = to_minor_units(price_info.get("price"))
        sid = f"cs_test_{len(self.sessions) + 1}"
        self.sessions[sid] = {
            "id": sid,
            "payment_status": "unpaid",
            "payment_intent": None,
            "customer_email": price_info.get("customer_email"),
            "amount_total": unit_amount,
            "metadata": {k: str(v) for k, v in (price_info.get("metadata") or {}).items()},
        }
        return {"url": f"https://checkout.stripe.test/{sid}", "id": sid}

    def complete(self, session_id: str, payment_intent: str, paid: bool = True) -> None:
        self.sessions[session_id]["payment_status"] = "paid" if paid else "unpaid"
        self.sessions[session_id]["payment_intent"] = payment_intent

    def add_session(self, **fields) -> str:
        sid = fields.setdefault("id", f"cs_test_{len(self.sessions) + 1}")
        self.sessions[sid] = fields
        return sid

    def retrieve_session(self, session_id: str) -> CheckoutSession:
        if session_id not in self.sessions:
            raise GatewayError("Failed to retrieve checkout session", error=f"No such checkout.session: {session_id}")
        return CheckoutSession.from_stripe(self.sessions[session_id])


class FakeIdentityVerifier(IdentityVerifier):
    TOKENS = {
        "tok-buyer": {"id": "u-buyer", "email": "buyer@x.com"},
        "tok-seller": {"id": "u-seller", "email": "s@x.com"},
    }

    def __init__(self):
        super().__init__(client=None)
        self.calls = 0

    def verify(self, access_token: str) -> Dict[str, Any]:
        self.calls += 1
        user = self.TOKENS.get(access_token)
        if not user:
            raise Unauthorized()
        return dict(user)


# --- Fixtures ---

FERN = {
    "name": "Fern",
    "category": "Indoor",
    "description": "Boston fern",
    "image": "https://img.test/fern.png",
    "price": 15,
    "quantity": 10,
    "seller": {"name": "Seller", "email": "s@x.com"},
}

@pytest.fixture()
def fern_data() -> Dict[str, Any]:
    return copy.deepcopy(FERN)

@pytest.fixture()
def plant_repo() -> FakePlantRepository:
    return FakePlantRepository()

@pytest.fixture()
def order_repo() -> FakeOrderRepository:
    return FakeOrderRepository()

@pytest.fixture()
def gateway() -> FakeStripeGateway:
    return FakeStripeGateway()

@pytest.fixture()
def verifier() -> FakeIdentityVerifier:
    return FakeIdentityVerifier()

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app, plant_repo, order_repo, gateway, verifier) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_plant_repository] = lambda: plant_repo
    app.dependency_overrides[get_order_repository] = lambda: order_repo
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_identity_verifier] = lambda: verifier
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()

@pytest.fixture()
def buyer_headers() -> Dict[str, str]:
    return {"Authorization": "Bearer tok-buyer"}

@pytest.fixture()
def seller_headers() -> Dict[str, str]:
    return {"Authorization": "Bearer tok-seller"}
