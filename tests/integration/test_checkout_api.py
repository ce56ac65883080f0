import pytest


@pytest.fixture()
def fern_id(plant_repo, fern_data):
    return plant_repo.create(fern_data)


def _checkout(client, headers, plant_id, price=15):
    return client.post(
        "/create-checkout-session",
        json={"plantId": plant_id, "name": "Fern", "price": price, "quantity": 1},
        headers=headers,
    )


def test_fern_end_to_end(client, buyer_headers, gateway, plant_repo, order_repo, fern_id):
    r = _checkout(client, buyer_headers, fern_id)
    assert r.status_code == 201
    session = r.json()["result"]
    assert session["url"].startswith("https://checkout.stripe.test/")
    # email acheteur issu du jeton vérifié
    assert gateway.sessions[session["id"]]["customer_email"] == "buyer@x.com"
    gateway.complete(session["id"], "pi_1")

    r = client.post("/payment-success", json={"sessionId": session["id"]}, headers=buyer_headers)
    assert r.status_code == 201
    order = r.json()["result"]["order"]
    assert order["price"] == 15
    assert order["quantity"] == 1
    assert order["transactionId"] == "pi_1"
    assert plant_repo.get_by_id(fern_id)["quantity"] == 9

    r = client.post("/payment-success", json={"sessionId": session["id"]}, headers=buyer_headers)
    assert r.status_code == 409
    assert r.json()["status"] is False
    assert len(order_repo.rows) == 1
    assert plant_repo.get_by_id(fern_id)["quantity"] == 9


def test_checkout_requires_authentication(client, fern_id, gateway):
    r = client.post("/create-checkout-session", json={"plantId": fern_id, "price": 15})
    assert r.status_code == 401
    assert gateway.sessions == {}


@pytest.mark.parametrize("price", [0, -1, "abc", None])
def test_checkout_invalid_stored_price_is_400(client, buyer_headers, plant_repo, fern_id, price):
    plant_repo.rows[fern_id]["price"] = price
    r = _checkout(client, buyer_headers, fern_id)
    assert r.status_code == 400
    assert r.json() == {"status": False, "message": "Invalid price"}


def test_checkout_empty_body_is_400(client, buyer_headers):
    assert client.post("/create-checkout-session", json={}, headers=buyer_headers).status_code == 400


def test_checkout_unknown_plant_is_404(client, buyer_headers):
    r = _checkout(client, buyer_headers, "6f1c2f0e-8a41-4b8e-9d6a-0c8f3b1e2a77")
    assert r.status_code == 404


def test_checkout_out_of_stock_is_409(client, buyer_headers, plant_repo, fern_data):
    fern_data["quantity"] = 0
    pid = plant_repo.create(fern_data)
    r = _checkout(client, buyer_headers, pid)
    assert r.status_code == 409


def test_payment_success_not_paid_is_400(client, buyer_headers, gateway, order_repo, fern_id):
    session = _checkout(client, buyer_headers, fern_id).json()["result"]
    r = client.post("/payment-success", json={"sessionId": session["id"]}, headers=buyer_headers)
    assert r.status_code == 400
    assert order_repo.rows == []


def test_payment_success_missing_session_id_is_400(client, buyer_headers):
    r = client.post("/payment-success", json={}, headers=buyer_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "sessionId required"


def test_payment_success_unknown_session_is_500(client, buyer_headers, order_repo):
    r = client.post("/payment-success", json={"sessionId": "cs_missing"}, headers=buyer_headers)
    assert r.status_code == 500
    body = r.json()
    assert body["status"] is False
    assert "cs_missing" in body["error"]
    assert order_repo.rows == []


def test_payment_success_plant_missing_is_404(client, buyer_headers, gateway, order_repo):
    sid = gateway.add_session(
        payment_status="paid",
        payment_intent="pi_1",
        amount_total=1500,
        metadata={"plantId": "6f1c2f0e-8a41-4b8e-9d6a-0c8f3b1e2a77"},
    )
    r = client.post("/payment-success", json={"sessionId": sid}, headers=buyer_headers)
    assert r.status_code == 404
    assert order_repo.rows == []


def test_payment_success_requires_authentication(client, gateway):
    r = client.post("/payment-success", json={"sessionId": "cs_test_1"})
    assert r.status_code == 401


def test_checkout_ignores_client_price(client, buyer_headers, gateway, fern_id):
    r = _checkout(client, buyer_headers, fern_id, price=0.01)
    assert r.status_code == 201
    assert gateway.sessions[r.json()["result"]["id"]]["amount_total"] == 1500


def test_payment_success_malformed_plant_reference_is_404(client, buyer_headers, gateway, order_repo):
    sid = gateway.add_session(
        payment_status="paid",
        payment_intent="pi_1",
        amount_total=1500,
        metadata={"plantId": "not-a-uuid"},
    )
    r = client.post("/payment-success", json={"sessionId": sid}, headers=buyer_headers)
    assert r.status_code == 404
    assert order_repo.rows == []
