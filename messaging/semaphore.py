from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from messaging.sms import (
    API_KEY_MISSING,
    NETWORK_ERROR,
    PROVIDER_ERROR,
    BalanceResult,
    DispatchResult,
    SmsProvider,
    as_number,
    response_json,
)

log = logging.getLogger("osca.sms.semaphore")


def _first_message(data: Any) -> Dict[str, Any]:
    # /messages answers with one object per recipient when several numbers are sent.
    if isinstance(data, list):
        return data[0] if data and isinstance(data[0], dict) else {}
    return data if isinstance(data, dict) else {}


class SemaphoreClient(SmsProvider):
    name = "semaphore"

    def __init__(
        self,
        api_key: str,
        sender_name: str = "OSCA",
        api_url: str = "https://api.semaphore.co/api/v4/messages",
        account_url: str = "https://api.semaphore.co/api/v4/account",
        timeout: float = 20.0,
        http: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key or ""
        self.sender_name = sender_name
        self.api_url = api_url
        self.account_url = account_url
        self.timeout = timeout
        self.http = http

    def _http(self) -> Any:
        return self.http or httpx

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send(self, numbers: List[str], message: str) -> DispatchResult:
        if not self.is_configured():
            return DispatchResult.failure(
                API_KEY_MISSING,
                "Semaphore SMS not configured. Please add SEMAPHORE_API_KEY to environment variables.",
                provider=self.name,
            )

        payload = {
            "apikey": self.api_key,
            "number": ",".join(numbers),
            "message": message,
            "sendername": self.sender_name,
        }

        t0 = time.time()
        log.info(
            "sms_vendor_request",
            extra={"extra": {"event": "sms_vendor_request", "provider": self.name, "recipients": len(numbers)}},
        )
        try:
            r = self._http().post(self.api_url, json=payload, timeout=self.timeout)
            data = response_json(r)
        except Exception as e:
            log.error(
                "sms_vendor_exception",
                extra={
                    "extra": {
                        "event": "sms_vendor_exception",
                        "provider": self.name,
                        "error_type": type(e).__name__,
                        "message": str(e),
                        "latency_ms": int((time.time() - t0) * 1000),
                    }
                },
                exc_info=True,
            )
            return DispatchResult.failure(NETWORK_ERROR, f"Failed to send SMS: {e}", provider=self.name)

        first = _first_message(data)
        ok = r.is_success and bool(first.get("message_id"))
        log.info(
            "sms_vendor_response",
            extra={
                "extra": {
                    "event": "sms_vendor_response",
                    "provider": self.name,
                    "ok": ok,
                    "status_code": r.status_code,
                    "latency_ms": int((time.time() - t0) * 1000),
                }
            },
        )
        if not ok:
            log.warning(
                "sms_vendor_failed",
                extra={"extra": {"event": "sms_vendor_failed", "provider": self.name, "status_code": r.status_code, "resp": data}},
            )
            return DispatchResult.failure(PROVIDER_ERROR, str(first.get("message") or "Failed to send SMS"), provider=self.name)

        return DispatchResult(
            success=True,
            message=f"SMS sent to {len(numbers)} recipient(s)",
            message_id=first.get("message_id"),
            credits=as_number(first.get("credits")),
            provider=self.name,
            sent_to=len(numbers),
        )

    def check_balance(self) -> BalanceResult:
        if not self.is_configured():
            return BalanceResult(success=False, error="API key not configured")
        try:
            r = self._http().get(self.account_url, params={"apikey": self.api_key}, timeout=self.timeout)
            data = response_json(r)
        except Exception as e:
            log.warning(
                "sms_balance_exception",
                extra={"extra": {"event": "sms_balance_exception", "provider": self.name, "error_type": type(e).__name__, "message": str(e)}},
            )
            return BalanceResult(success=False, error=str(e))

        body = data if isinstance(data, dict) else {}
        if not r.is_success:
            return BalanceResult(success=False, error=str(body.get("message") or "Failed to check balance"))
        return BalanceResult(success=True, balance=as_number(body.get("credit_balance")))
