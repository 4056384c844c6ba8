from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from messaging.dispatcher import SmsDispatcher
from messaging.sms import DispatchResult
from notifications.service import NotificationService
from notifications.templates import AnnouncementPayload, message_info

router = APIRouter()


@lru_cache(maxsize=1)
def get_dispatcher() -> SmsDispatcher:
    return SmsDispatcher()


def get_notification_service(dispatcher: SmsDispatcher = Depends(get_dispatcher)) -> NotificationService:
    return NotificationService(dispatcher=dispatcher)


class SendRequest(BaseModel):
    # Left untyped: malformed recipients/message are rejected by SmsDispatcher as 400, not by pydantic as 422.
    recipients: Any = None
    message: Any = None
    provider: Any = None


class AnnouncementRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    date: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    barangay: Optional[str] = None
    provider: Optional[str] = None


class MessageInfoRequest(BaseModel):
    message: str = ""


def _dispatch_response(res: DispatchResult) -> JSONResponse:
    if res.success:
        status_code = 200
    elif res.is_validation_error:
        status_code = 400
    else:
        status_code = 500
    return JSONResponse(status_code=status_code, content=res.as_response())


@router.post("/sms/send")
def send_sms(req: SendRequest, dispatcher: SmsDispatcher = Depends(get_dispatcher)):
    res = dispatcher.send(req.recipients, req.message, provider=req.provider)
    return _dispatch_response(res)


@router.post("/sms/announcement")
def send_announcement(req: AnnouncementRequest, svc: NotificationService = Depends(get_notification_service)):
    payload = AnnouncementPayload(
        title=req.title,
        description=req.description,
        date=req.date,
        time=req.time,
        location=req.location,
        barangay=req.barangay,
    )
    res = svc.broadcast_announcement(payload, barangay=req.barangay, provider=req.provider)
    return _dispatch_response(res)


@router.get("/sms/balance")
def sms_balance(provider: Optional[str] = None, dispatcher: SmsDispatcher = Depends(get_dispatcher)):
    res = dispatcher.check_balance(provider)
    return JSONResponse(status_code=200 if res.success else 500, content=res.as_response())


@router.get("/sms/status")
def sms_status(dispatcher: SmsDispatcher = Depends(get_dispatcher)):
    return {"ok": True, **dispatcher.status()}


@router.post("/sms/message-info")
def sms_message_info(req: MessageInfoRequest):
    return message_info(req.message).as_dict()
