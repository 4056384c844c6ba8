from __future__ import annotations

import os
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.routers.sms import get_dispatcher
from config.settings import settings
from messaging.dispatcher import SmsDispatcher

router = APIRouter()


@router.get("/health")
def health(dispatcher: SmsDispatcher = Depends(get_dispatcher)):
    sms = dispatcher.status()
    payload: Dict[str, Any] = {
        "ok": True,
        "service": os.getenv("OSCA_SERVICE") or "osca-sms",
        "environment": settings.ENVIRONMENT,
        "sms_provider": sms["provider"],
        "sms_configured": sms["configured"],
        "time_unix": time.time(),
    }
    return payload
