import pytest

USER = 21


@pytest.fixture
def headers(auth_headers):
    return auth_headers(USER)


def test_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.get_json()["status"] is True


def test_requires_token(client):
    r = client.get("/api/cart")
    assert r.status_code == 401
    assert r.get_json()["status"] is False


def test_invalid_token(client):
    r = client.get("/api/cart", headers={"Authorization": "Bearer not.a.jwt"})
    assert r.status_code == 401


def test_cart_flow(client, headers, make_course):
    c = make_course(title="Docker", price="35.00")

    r = client.get("/api/cart", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["items"] == []

    r = client.post("/api/cart", json={"course_id": c.id}, headers=headers)
    assert r.status_code == 201
    data = r.get_json()["data"]
    assert data["total"] == 35.0
    assert data["items"][0]["course"]["title"] == "Docker"

    r = client.delete(f"/api/cart/{c.id}", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["total"] == 0.0

    r = client.delete("/api/cart", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["item_count"] == 0


@pytest.mark.parametrize("published, first, second", [
    (True, 201, 409),
    (False, 400, 400),
])
def test_add_to_cart_status_codes(client, headers, make_course, published, first, second):
    c = make_course(published=published)
    assert client.post("/api/cart", json={"course_id": c.id}, headers=headers).status_code == first
    r = client.post("/api/cart", json={"course_id": c.id}, headers=headers)
    assert r.status_code == second
    assert r.get_json()["status"] is False


def test_add_unknown_course_is_404(client, headers):
    r = client.post("/api/cart", json={"course_id": 999}, headers=headers)
    assert r.status_code == 404
    assert r.get_json()["data"]["kind"] == "not_found"


def test_add_without_course_id_is_400(client, headers):
    assert client.post("/api/cart", json={}, headers=headers).status_code == 400
    assert client.post("/api/cart", json={"course_id": "abc"}, headers=headers).status_code == 400


def test_checkout_flow(client, headers, make_course, make_coupon):
    a = make_course(price="80.00")
    b = make_course(price="20.00")
    make_coupon(code="SAVE10", value="10", usage_limit=1)
    for c in (a, b):
        client.post("/api/cart", json={"course_id": c.id}, headers=headers)

    r = client.post("/api/cart/checkout", json={"coupon_code": "save10"}, headers=headers)
    assert r.status_code == 201
    data = r.get_json()["data"]
    assert data["order"]["money"] == {"subtotal": 100.0, "discount": 10.0, "total": 90.0}
    assert data["order"]["coupon"]["code"] == "SAVE10"
    assert len(data["enrollments"]) == 2
    assert r.headers["X-Order-Number"] == data["order"]["order_number"]

    r = client.get("/api/cart", headers=headers)
    assert r.get_json()["data"]["items"] == []

    r = client.get("/api/orders", headers=headers)
    assert r.status_code == 200
    orders = r.get_json()["data"]
    assert orders["meta"]["total"] == 1
    number = orders["items"][0]["order_number"]

    assert client.get(f"/api/orders/{number}", headers=headers).status_code == 200
    assert client.get("/api/orders/ORD-0-NOPE", headers=headers).status_code == 404

    r = client.get(f"/api/enrollments/{a.id}", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["enrolled"] is True
    assert client.get("/api/enrollments", headers=headers).get_json()["data"]["meta"]["total"] == 2

    # already enrolled now
    assert client.post("/api/cart", json={"course_id": a.id}, headers=headers).status_code == 409


def test_checkout_empty_cart_is_400(client, headers):
    r = client.post("/api/cart/checkout", json={}, headers=headers)
    assert r.status_code == 400
    assert r.get_json()["message"] == "cart is empty"


def test_checkout_with_exhausted_coupon_is_400(client, headers, make_course, make_coupon):
    make_coupon(code="DONE", usage_limit=1, used_count=1)
    client.post("/api/cart", json={"course_id": make_course().id}, headers=headers)
    r = client.post("/api/cart/checkout", json={"coupon_code": "DONE"}, headers=headers)
    assert r.status_code == 400
    assert client.get("/api/cart", headers=headers).get_json()["data"]["item_count"] == 1


def test_checkout_rejects_non_string_coupon(client, headers):
    r = client.post("/api/cart/checkout", json={"coupon_code": 10}, headers=headers)
    assert r.status_code == 400


def test_validate_coupon(client, headers, make_coupon):
    make_coupon(code="CAP5", value="10", max_discount=5)
    r = client.post("/api/coupons/validate", json={"code": "cap5", "subtotal": 100}, headers=headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["discount"] == 5.0
    assert r.get_json()["data"]["coupon"]["code"] == "CAP5"

    r = client.post("/api/coupons/validate", json={"code": "nope", "subtotal": 100}, headers=headers)
    assert r.status_code == 404
    r = client.post("/api/coupons/validate", json={"code": "cap5", "subtotal": -5}, headers=headers)
    assert r.status_code == 400


def test_coupon_admin_requires_admin_role(client, auth_headers, make_user):
    student = make_user(email="student@example.com")
    admin = make_user(email="admin@example.com", role="admin")
    payload = {"code": "launch", "type": "fixed", "value": 25, "valid_until": "2099-01-01T00:00:00Z"}

    assert client.post("/api/coupons", json=payload, headers=auth_headers(student.id)).status_code == 403
    assert client.post("/api/coupons", json=payload, headers=auth_headers(999)).status_code == 401

    r = client.post("/api/coupons", json=payload, headers=auth_headers(admin.id))
    assert r.status_code == 201
    assert r.get_json()["data"]["code"] == "LAUNCH"

    assert client.post("/api/coupons", json=payload, headers=auth_headers(admin.id)).status_code == 409

    r = client.get("/api/coupons?active=true", headers=auth_headers(admin.id))
    assert r.status_code == 200
    assert [c["code"] for c in r.get_json()["data"]["items"]] == ["LAUNCH"]


def test_missing_enrollment_is_404(client, headers):
    assert client.get("/api/enrollments/12345", headers=headers).status_code == 404


def test_unknown_route_uses_error_envelope(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.get_json()["status"] is False
