from __future__ import annotations

import logging
import time
from typing import Any, List, Optional

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

log = logging.getLogger("osca.sms.iprogtech")


class IProgTechClient(SmsProvider):
    """
    iProg Tech SMS API (default provider).

    POST {api_url}/sms_messages            one recipient
    POST {api_url}/sms_messages/send_bulk  more than one recipient
    GET  {api_url}/account/sms_credits     remaining credits, read after every successful send

    A send succeeded only when the JSON body carries status == 200; the HTTP status alone is not enough.
    """

    name = "iprogtech"

    def __init__(
        self,
        api_token: str,
        api_url: str = "https://sms.iprogtech.com/api/v1",
        sms_provider: int = 0,
        timeout: float = 20.0,
        http: Optional[httpx.Client] = None,
    ):
        self.api_token = api_token or ""
        self.api_url = (api_url or "").rstrip("/")
        self.sms_provider = sms_provider
        self.timeout = timeout
        self.http = http

    def _http(self) -> Any:
        return self.http or httpx

    def is_configured(self) -> bool:
        return bool(self.api_token)

    def endpoint_for(self, count: int) -> str:
        if count > 1:
            return f"{self.api_url}/sms_messages/send_bulk"
        return f"{self.api_url}/sms_messages"

    def send(self, numbers: List[str], message: str) -> DispatchResult:
        if not self.is_configured():
            return DispatchResult.failure(
                API_KEY_MISSING,
                "iProg Tech SMS not configured. Please add IPROGTECH_API_TOKEN to environment variables.",
                provider=self.name,
            )

        url = self.endpoint_for(len(numbers))
        payload = {
            "api_token": self.api_token,
            "phone_number": ",".join(numbers),
            "message": message,
            "sms_provider": self.sms_provider,
        }

        t0 = time.time()
        log.info(
            "sms_vendor_request",
            extra={"extra": {"event": "sms_vendor_request", "provider": self.name, "recipients": len(numbers), "bulk": len(numbers) > 1}},
        )
        try:
            r = self._http().post(url, json=payload, timeout=self.timeout)
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

        body = data if isinstance(data, dict) else {}
        ok = r.is_success and str(body.get("status")) == "200"
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
                extra={"extra": {"event": "sms_vendor_failed", "provider": self.name, "status_code": r.status_code, "resp": body}},
            )
            return DispatchResult.failure(PROVIDER_ERROR, str(body.get("message") or "Failed to send SMS"), provider=self.name)

        balance = self.check_balance()
        return DispatchResult(
            success=True,
            message=f"SMS sent to {len(numbers)} recipient(s)",
            message_id=body.get("message_id") or body.get("message_ids"),
            credits=balance.balance if balance.success else None,
            provider=self.name,
            sent_to=len(numbers),
        )

    def check_balance(self) -> BalanceResult:
        if not self.is_configured():
            return BalanceResult(success=False, error="API token not configured")
        try:
            r = self._http().get(
                f"{self.api_url}/account/sms_credits",
                params={"api_token": self.api_token},
                timeout=self.timeout,
            )
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
        account = body.get("data")
        if not isinstance(account, dict):
            return BalanceResult(success=False, error="Unexpected credits response")
        return BalanceResult(success=True, balance=as_number(account.get("load_balance")))
