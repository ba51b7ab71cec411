from unittest.mock import MagicMock

from app.auth.codes import VerificationCodeStore
from app.auth.tokens import hash_verification_code, new_verification_code
from app.config import settings

def _request_code(client, email: str = "login@example.com") -> str:
    r = client.post("/auth/request-code", json={"email": email})
    assert r.status_code == 200, r.text
    code = r.json().get("code")
    assert code, "expected code to be returned outside prod"
    return code

def _stored_hash(fake_redis: MagicMock) -> str:
    args, kwargs = fake_redis.set.call_args
    assert kwargs["ex"] == 300
    return args[1]

def test_code_login_issues_working_token(client, fake_redis):
    code = _request_code(client)
    fake_redis.getdel.return_value = _stored_hash(fake_redis)

    r = client.post("/auth/verify-code", json={"email": "login@example.com", "code": code})
    assert r.status_code == 200, r.text
    token = r.json()["access_token"]
    fake_redis.getdel.assert_called_once_with("auth:code:login@example.com")

    r = client.get("/workspaces", headers={"authorization": f"bearer {token}"})
    assert r.status_code == 200
    assert r.json() == []

def test_wrong_code_is_rejected(client, fake_redis):
    code = _request_code(client)
    fake_redis.getdel.return_value = _stored_hash(fake_redis)

    wrong = "0" * len(code) if code != "0" * len(code) else "1" * len(code)
    r = client.post("/auth/verify-code", json={"email": "login@example.com", "code": wrong})
    assert r.status_code == 400
    assert r.json()["detail"] == "invalid code"

def test_expired_or_used_code_is_rejected(client, fake_redis):
    code = _request_code(client)
    fake_redis.getdel.return_value = None

    r = client.post("/auth/verify-code", json={"email": "login@example.com", "code": code})
    assert r.status_code == 400

def test_code_is_not_returned_in_prod(client, monkeypatch):
    monkeypatch.setattr(settings, "app_env", "prod")
    r = client.post("/auth/request-code", json={"email": "prod@example.com"})
    assert r.status_code == 200
    assert r.json()["code"] is None
    assert r.json()["expires_in"] == 300

def test_email_is_normalised(client, fake_redis):
    _request_code(client, "Mixed@Example.com")
    args, _ = fake_redis.set.call_args
    assert args[0] == "auth:code:mixed@example.com"

def test_store_keeps_only_a_hash():
    fake = MagicMock()
    store = VerificationCodeStore(fake, ttl_seconds=60)

    store.put("a@example.com", "123456")
    fake.set.assert_called_once_with(
        "auth:code:a@example.com", hash_verification_code("a@example.com", "123456"), ex=60
    )

    fake.getdel.return_value = hash_verification_code("a@example.com", "123456").encode("utf-8")
    assert store.consume("a@example.com", "123456") is True

def test_codes_are_numeric_and_sized():
    code = new_verification_code()
    assert code.isdigit()
    assert len(code) == settings.verification_code_length
