from __future__ import annotations

import logging
from typing import List, Optional

from messaging.dispatcher import SmsDispatcher
from messaging.sms import DispatchResult, Recipient
from notifications import templates
from notifications.templates import AnnouncementPayload, AppointmentPayload, BenefitPayload, DocumentPayload
from repos.senior_repo import SeniorRepository

log = logging.getLogger("osca.notifications")


class NotificationService:
    """Portal-facing notifications: render a template, pick recipients, hand off to SmsDispatcher."""

    def __init__(self, dispatcher: Optional[SmsDispatcher] = None, seniors: Optional[SeniorRepository] = None):
        self.dispatcher = dispatcher or SmsDispatcher()
        self.seniors = seniors or SeniorRepository()

    def _send(self, kind: str, recipients: List[Recipient], message: str, provider: Optional[str]) -> DispatchResult:
        res = self.dispatcher.send(recipients, message, provider=provider)
        log.info(
            "notification_sent",
            extra={
                "extra": {
                    "event": "notification_sent",
                    "kind": kind,
                    "recipients": len(recipients),
                    "ok": res.success,
                    "error": res.error or "",
                }
            },
        )
        return res

    def broadcast_announcement(
        self, payload: AnnouncementPayload, barangay: Optional[str] = None, provider: Optional[str] = None
    ) -> DispatchResult:
        recipients = self.seniors.recipients(barangay)
        return self._send("announcement", recipients, templates.announcement(payload), provider)

    def notify_appointment(
        self, phone_number: str, payload: AppointmentPayload, confirmed: bool = False, provider: Optional[str] = None
    ) -> DispatchResult:
        msg = templates.appointment_confirmation(payload) if confirmed else templates.appointment_reminder(payload)
        kind = "appointment_confirmation" if confirmed else "appointment_reminder"
        return self._send(kind, [Recipient(phone_number, payload.senior_name)], msg, provider)

    def notify_benefit(self, phone_number: str, payload: BenefitPayload, provider: Optional[str] = None) -> DispatchResult:
        approved = payload.status.lower() == "approved"
        msg = templates.benefit_approval(payload) if approved else templates.benefit_rejection(payload)
        kind = "benefit_approval" if approved else "benefit_rejection"
        return self._send(kind, [Recipient(phone_number, payload.senior_name)], msg, provider)

    def notify_document(self, phone_number: str, payload: DocumentPayload, provider: Optional[str] = None) -> DispatchResult:
        ready = payload.status.lower() in ("ready", "ready_for_pickup", "completed")
        msg = templates.document_ready(payload) if ready else templates.document_rejection(payload)
        kind = "document_ready" if ready else "document_rejection"
        return self._send(kind, [Recipient(phone_number, payload.senior_name)], msg, provider)

    def notify_document_status(
        self, phone_number: str, senior_name: str, status: str, request_id: str, provider: Optional[str] = None
    ) -> DispatchResult:
        msg = templates.document_status_update(senior_name, status, request_id)
        return self._send("document_status", [Recipient(phone_number, senior_name)], msg, provider)

    def send_birthday_greeting(self, phone_number: str, senior_name: str, provider: Optional[str] = None) -> DispatchResult:
        return self._send("birthday", [Recipient(phone_number, senior_name)], templates.birthday_greeting(senior_name), provider)

    def send_emergency_alert(
        self, message: str, location: Optional[str] = None, barangay: Optional[str] = None, provider: Optional[str] = None
    ) -> DispatchResult:
        recipients = self.seniors.recipients(barangay)
        return self._send("emergency", recipients, templates.emergency_alert(message, location), provider)
