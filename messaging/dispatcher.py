from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from config.settings import Settings, settings
from messaging.iprogtech import IProgTechClient
from messaging.semaphore import SemaphoreClient
from messaging.sms import (
    INVALID_NUMBERS,
    INVALID_PROVIDER,
    MESSAGE_REQUIRED,
    NETWORK_ERROR,
    RECIPIENTS_REQUIRED,
    BalanceResult,
    DispatchResult,
    Recipient,
    SmsProvider,
)
from notifications.templates import truncate_message
from ops.structured_logger import dest_hint
from phone.normalizer import normalize_phone_number

log = logging.getLogger("osca.dispatcher")

ProviderFactory = Callable[[Settings], SmsProvider]

# New vendors register here; SmsDispatcher only ever looks providers up by name.
PROVIDER_FACTORIES: Dict[str, ProviderFactory] = {
    "iprogtech": lambda cfg: IProgTechClient(
        api_token=cfg.IPROGTECH_API_TOKEN,
        api_url=cfg.IPROGTECH_API_URL,
        sms_provider=cfg.IPROGTECH_SMS_PROVIDER,
        timeout=cfg.SMS_HTTP_TIMEOUT_S,
    ),
    "semaphore": lambda cfg: SemaphoreClient(
        api_key=cfg.SEMAPHORE_API_KEY,
        sender_name=cfg.SEMAPHORE_SENDER_NAME,
        api_url=cfg.SEMAPHORE_API_URL,
        account_url=cfg.SEMAPHORE_ACCOUNT_URL,
        timeout=cfg.SMS_HTTP_TIMEOUT_S,
    ),
}


def build_providers(cfg: Optional[Settings] = None) -> Dict[str, SmsProvider]:
    cfg = cfg or settings
    return {name: factory(cfg) for name, factory in PROVIDER_FACTORIES.items()}


def coerce_recipient(item: Any) -> Recipient:
    """Accepts '0917...', Recipient(...) or {'number': ..., 'name': ...}."""
    if isinstance(item, Recipient):
        return item
    if isinstance(item, Mapping):
        number = item.get("number") or item.get("phone_number") or ""
        name = item.get("name") or item.get("display_name")
        return Recipient(phone_number=str(number), display_name=name)
    return Recipient(phone_number="" if item is None else str(item))


class SmsDispatcher:
    def __init__(self, providers: Optional[Dict[str, SmsProvider]] = None, default_provider: Optional[str] = None):
        self.providers = providers if providers is not None else build_providers()
        self.default_provider = (default_provider or settings.SMS_PROVIDER or "").strip().lower()

    def _resolve(self, provider: Any) -> Optional[SmsProvider]:
        name = provider or self.default_provider or ""
        if not isinstance(name, str):
            return None
        name = name.strip().lower()
        return self.providers.get(name)

    def normalize_recipients(self, recipients: Iterable[Any]) -> tuple[List[str], int]:
        numbers: List[str] = []
        dropped = 0
        for item in recipients:
            r = coerce_recipient(item)
            canonical = normalize_phone_number(r.phone_number)
            if canonical is None:
                dropped += 1
                log.warning(
                    "sms_invalid_number",
                    extra={"extra": {"event": "sms_invalid_number", "dest": dest_hint(r.phone_number)}},
                )
                continue
            numbers.append(canonical)
        return numbers, dropped

    def send(self, recipients: Any, message: Any, provider: Any = None) -> DispatchResult:
        if not isinstance(recipients, (list, tuple)) or not recipients:
            return DispatchResult.failure(RECIPIENTS_REQUIRED, "Recipients are required")
        if not isinstance(message, str) or not message.strip():
            return DispatchResult.failure(MESSAGE_REQUIRED, "Message is required")

        numbers, dropped = self.normalize_recipients(recipients)
        if not numbers:
            res = DispatchResult.failure(INVALID_NUMBERS, "No valid phone numbers provided")
            res.dropped = dropped
            return res

        client = self._resolve(provider)
        if client is None:
            res = DispatchResult.failure(INVALID_PROVIDER, "Invalid SMS provider")
            res.dropped = dropped
            return res

        body = truncate_message(message)
        t0 = time.time()
        log.info(
            "sms_send_attempt",
            extra={"extra": {"event": "sms_send_attempt", "provider": client.name, "recipients": len(numbers), "dropped": dropped}},
        )
        try:
            res = client.send(numbers, body)
        except Exception as e:
            log.error(
                "sms_send_exception",
                extra={
                    "extra": {
                        "event": "sms_send_exception",
                        "provider": client.name,
                        "error_type": type(e).__name__,
                        "message": str(e),
                        "latency_ms": int((time.time() - t0) * 1000),
                    }
                },
                exc_info=True,
            )
            res = DispatchResult.failure(NETWORK_ERROR, f"Failed to send SMS: {e}", provider=client.name)

        res.dropped = dropped
        log.info(
            "sms_send_result",
            extra={
                "extra": {
                    "event": "sms_send_result",
                    "provider": client.name,
                    "ok": res.success,
                    "error": res.error or "",
                    "recipients": len(numbers),
                    "dropped": dropped,
                    "latency_ms": int((time.time() - t0) * 1000),
                }
            },
        )
        return res

    def check_balance(self, provider: Optional[str] = None) -> BalanceResult:
        client = self._resolve(provider)
        if client is None:
            return BalanceResult(success=False, error="Invalid SMS provider")
        try:
            return client.check_balance()
        except Exception as e:
            log.error(
                "sms_balance_exception",
                extra={"extra": {"event": "sms_balance_exception", "provider": client.name, "error_type": type(e).__name__}},
                exc_info=True,
            )
            return BalanceResult(success=False, error=str(e))

    def status(self) -> Dict[str, Any]:
        default = self._resolve(None)
        return {
            "provider": self.default_provider,
            "configured": bool(default and default.is_configured()),
            "providers": {name: {"configured": p.is_configured()} for name, p in self.providers.items()},
        }
