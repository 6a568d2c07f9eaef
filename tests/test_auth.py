from storefront.sessions import create_session_token, decode_session_token


def test_session_token_roundtrip():
    token = create_session_token("abc123")
    assert decode_session_token(token) == "abc123"
    assert decode_session_token(token + "x") is None
    assert decode_session_token("") is None
    assert decode_session_token(None) is None


def test_login_logout_api(client):
    assert client.get("/api/auth/me").json() == {"logged_in": False, "name": None, "email": None}

    r = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "secret"})
    assert r.status_code == 200
    assert r.json() == {"logged_in": True, "name": "John Doe", "email": "jane@example.com"}
    assert client.get("/api/auth/me").json()["logged_in"] is True

    r = client.post("/api/auth/logout")
    assert r.json()["logged_in"] is False


def test_login_requires_valid_email(client):
    r = client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})
    assert r.status_code == 422
