import httpx
from fastapi.testclient import TestClient

from app.api_service import app
from app.routers.sms import get_dispatcher, get_notification_service
from messaging.dispatcher import SmsDispatcher
from messaging.iprogtech import IProgTechClient
from messaging.semaphore import SemaphoreClient
from messaging.sms import Recipient
from notifications.service import NotificationService


class FakeSeniors:
    def recipients(self, barangay=None):
        return [Recipient("09171234567", "Juan"), Recipient("n/a", "Nobody")]


def _client_with(handler, calls, iprog_token="tok", semaphore_key="key"):
    def wrapped(request):
        calls.append(request)
        return handler(request)

    http = httpx.Client(transport=httpx.MockTransport(wrapped))
    dispatcher = SmsDispatcher(
        providers={
            "iprogtech": IProgTechClient(api_token=iprog_token, http=http),
            "semaphore": SemaphoreClient(api_key=semaphore_key, http=http),
        },
        default_provider="iprogtech",
    )
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_notification_service] = lambda: NotificationService(dispatcher=dispatcher, seniors=FakeSeniors())
    return TestClient(app)


def _iprog_ok(request):
    if request.method == "POST":
        return httpx.Response(200, json={"status": 200, "message_id": "iprog-7"})
    return httpx.Response(200, json={"data": {"load_balance": 120}})


def teardown_function(_):
    app.dependency_overrides.clear()


def test_send_success_default_provider():
    calls = []
    client = _client_with(_iprog_ok, calls)
    r = client.post("/api/sms/send", json={"recipients": [{"number": "0917 123 4567"}, "9181234567"], "message": "Hello"})

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["messageId"] == "iprog-7"
    assert body["credits"] == 120.0
    assert body["message"] == "SMS sent to 2 recipient(s)"
    assert r.headers["X-Request-Id"]
    assert calls[0].url.path.endswith("/sms_messages/send_bulk")


def test_send_via_semaphore():
    calls = []
    client = _client_with(lambda req: httpx.Response(200, json=[{"message_id": 55}]), calls)
    r = client.post("/api/sms/send", json={"recipients": ["09171234567"], "message": "Hi", "provider": "semaphore"})

    assert r.status_code == 200
    assert r.json()["messageId"] == 55
    assert str(calls[0].url) == "https://api.semaphore.co/api/v4/messages"


def test_send_validation_errors_are_400_without_requests():
    calls = []
    client = _client_with(_iprog_ok, calls)

    r = client.post("/api/sms/send", json={"recipients": [], "message": "Hi"})
    assert r.status_code == 400
    assert r.json()["error"] == "RECIPIENTS_REQUIRED"

    r = client.post("/api/sms/send", json={"recipients": ["09171234567"], "message": " "})
    assert r.status_code == 400
    assert r.json()["error"] == "MESSAGE_REQUIRED"

    r = client.post("/api/sms/send", json={"recipients": ["not-a-number"], "message": "Hi"})
    assert r.status_code == 400
    assert r.json() == {
        "success": False,
        "message": "No valid phone numbers provided",
        "error": "INVALID_NUMBERS",
        "dropped": 1,
    }

    r = client.post("/api/sms/send", json={"recipients": ["09171234567"], "message": "Hi", "provider": "globe"})
    assert r.status_code == 400
    assert r.json()["error"] == "INVALID_PROVIDER"

    assert calls == []


def test_send_missing_credential_is_500():
    calls = []
    client = _client_with(_iprog_ok, calls, iprog_token="")
    r = client.post("/api/sms/send", json={"recipients": ["09171234567"], "message": "Hi"})

    assert r.status_code == 500
    assert r.json()["error"] == "API_KEY_MISSING"
    assert "IPROGTECH_API_TOKEN" in r.json()["message"]
    assert calls == []


def test_send_vendor_failure_is_500_with_vendor_message():
    calls = []
    client = _client_with(lambda req: httpx.Response(200, json={"status": 403, "message": "Invalid api token"}), calls)
    r = client.post("/api/sms/send", json={"recipients": ["09171234567"], "message": "Hi"})

    assert r.status_code == 500
    assert r.json()["success"] is False
    assert r.json()["message"] == "Invalid api token"


def test_announcement_broadcast_drops_invalid_seniors():
    calls = []
    client = _client_with(_iprog_ok, calls)
    r = client.post("/api/sms/announcement", json={"title": "Payout", "description": "Bring ID", "barangay": "San Jose"})

    assert r.status_code == 200
    assert r.json()["dropped"] == 1
    sent = calls[0].content
    assert b"639171234567" in sent


def test_balance_status_and_message_info():
    calls = []
    client = _client_with(_iprog_ok, calls)

    r = client.get("/api/sms/balance")
    assert r.status_code == 200
    assert r.json() == {"success": True, "balance": 120.0}

    r = client.get("/api/sms/status")
    assert r.json()["provider"] == "iprogtech"
    assert r.json()["providers"]["semaphore"] == {"configured": True}

    r = client.post("/api/sms/message-info", json={"message": "a" * 161})
    assert r.json() == {"length": 161, "smsCount": 2, "isValid": True}


def test_health():
    client = _client_with(_iprog_ok, [])
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["sms_provider"] == "iprogtech"
    assert r.json()["sms_configured"] is True


def test_send_malformed_body_fields_are_400_not_422():
    calls = []
    client = _client_with(_iprog_ok, calls)

    r = client.post("/api/sms/send", json={"recipients": "09171234567", "message": "hi"})
    assert r.status_code == 400
    assert r.json()["error"] == "RECIPIENTS_REQUIRED"

    r = client.post("/api/sms/send", json={"recipients": ["09171234567"], "message": None})
    assert r.status_code == 400
    assert r.json()["error"] == "MESSAGE_REQUIRED"

    r = client.post("/api/sms/send", json={"message": "hi"})
    assert r.status_code == 400
    assert r.json()["error"] == "RECIPIENTS_REQUIRED"

    assert calls == []
