from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

# Error codes carried by DispatchResult.error. The first four are caller mistakes (HTTP 400),
# the rest are configuration or vendor-side failures (HTTP 500).
RECIPIENTS_REQUIRED = "RECIPIENTS_REQUIRED"
MESSAGE_REQUIRED = "MESSAGE_REQUIRED"
INVALID_NUMBERS = "INVALID_NUMBERS"
INVALID_PROVIDER = "INVALID_PROVIDER"
API_KEY_MISSING = "API_KEY_MISSING"
PROVIDER_ERROR = "PROVIDER_ERROR"
NETWORK_ERROR = "NETWORK_ERROR"

VALIDATION_ERRORS = frozenset({RECIPIENTS_REQUIRED, MESSAGE_REQUIRED, INVALID_NUMBERS, INVALID_PROVIDER})


@dataclass
class Recipient:
    phone_number: str
    display_name: Optional[str] = None


@dataclass
class DispatchResult:
    success: bool
    message: str
    message_id: Optional[Any] = None
    credits: Optional[float] = None
    error: Optional[str] = None
    provider: Optional[str] = None
    sent_to: int = 0
    dropped: int = 0

    @classmethod
    def failure(cls, error: str, message: str, provider: Optional[str] = None) -> "DispatchResult":
        return cls(success=False, message=message, error=error, provider=provider)

    @property
    def is_validation_error(self) -> bool:
        return self.error in VALIDATION_ERRORS

    def as_response(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success, "message": self.message, "dropped": self.dropped}
        if self.message_id is not None:
            out["messageId"] = self.message_id
        if self.credits is not None:
            out["credits"] = self.credits
        if self.error:
            out["error"] = self.error
        return out


@dataclass
class BalanceResult:
    success: bool
    balance: Optional[float] = None
    error: Optional[str] = None

    def as_response(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success}
        if self.balance is not None:
            out["balance"] = self.balance
        if self.error:
            out["error"] = self.error
        return out


class SmsProvider:
    """
    One SMS vendor. Implementations get canonical numbers only (63XXXXXXXXXX)
    and must turn every failure into a DispatchResult/BalanceResult instead of raising.
    """

    name: str = ""

    def is_configured(self) -> bool:
        raise NotImplementedError

    def send(self, numbers: List[str], message: str) -> DispatchResult:
        raise NotImplementedError

    def check_balance(self) -> BalanceResult:
        raise NotImplementedError


def as_number(v: Any) -> Optional[float]:
    # Vendors report balances as ints, floats or numeric strings.
    if v is None or isinstance(v, bool):
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None


def response_json(r: Any) -> Any:
    try:
        return r.json()
    except Exception:
        return {"message": (r.text or "")[:500], "status_code": r.status_code}
