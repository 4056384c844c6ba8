from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

# 10 concatenated 160-char segments; most PH carriers refuse longer bodies.
MAX_SMS_LENGTH = 1600
SEGMENT_LENGTH = 160


@dataclass
class AnnouncementPayload:
    title: str
    description: str
    date: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    barangay: Optional[str] = None


@dataclass
class AppointmentPayload:
    senior_name: str
    date: str
    time: str
    purpose: str
    location: Optional[str] = None


@dataclass
class BenefitPayload:
    senior_name: str
    benefit_type: str
    status: str
    claim_date: Optional[str] = None
    location: Optional[str] = None


@dataclass
class DocumentPayload:
    senior_name: str
    document_type: str
    status: str
    claim_date: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class MessageInfo:
    length: int
    sms_count: int
    is_valid: bool

    def as_dict(self) -> dict:
        return {"length": self.length, "smsCount": self.sms_count, "isValid": self.is_valid}


def truncate_message(message: str, max_length: int = MAX_SMS_LENGTH) -> str:
    if len(message) <= max_length:
        return message
    return message[: max_length - 3] + "..."


def message_info(message: str) -> MessageInfo:
    """
    Character length and billable segment count of an SMS body.
    Informational only: nothing splits messages on this count.
    """
    length = len(message or "")
    return MessageInfo(
        length=length,
        sms_count=math.ceil(length / SEGMENT_LENGTH),
        is_valid=0 < length <= MAX_SMS_LENGTH,
    )


def announcement(data: AnnouncementPayload) -> str:
    msg = "📢 OSCA ANNOUNCEMENT\n\n"
    msg += f"{data.title}\n\n"
    msg += f"{data.description}\n"
    if data.date:
        msg += f"\n📅 Date: {data.date}"
    if data.time:
        msg += f"\n🕐 Time: {data.time}"
    if data.location:
        msg += f"\n📍 Location: {data.location}"
    if data.barangay:
        msg += f"\n🏘️ Barangay: {data.barangay}"
    msg += "\n\n- OSCA Management"
    return truncate_message(msg)


def _appointment_block(data: AppointmentPayload, purpose_label: str) -> str:
    block = f"📅 {data.date}\n🕐 {data.time}\n📋 {purpose_label}{data.purpose}\n"
    if data.location:
        block += f"📍 {data.location}\n"
    return block


def appointment_reminder(data: AppointmentPayload) -> str:
    msg = "📅 APPOINTMENT REMINDER\n\n"
    msg += f"Dear {data.senior_name},\n\n"
    msg += "You have an appointment:\n"
    msg += _appointment_block(data, "Purpose: ")
    msg += "\nPlease arrive 10 minutes early.\n"
    msg += "\n- OSCA"
    return truncate_message(msg)


def appointment_confirmation(data: AppointmentPayload) -> str:
    msg = "✅ APPOINTMENT CONFIRMED\n\n"
    msg += f"Dear {data.senior_name},\n\n"
    msg += "Your appointment has been confirmed:\n"
    msg += _appointment_block(data, "")
    msg += "\n- OSCA"
    return truncate_message(msg)


def benefit_approval(data: BenefitPayload) -> str:
    msg = "✅ BENEFIT APPROVED\n\n"
    msg += f"Dear {data.senior_name},\n\n"
    msg += f"Your {data.benefit_type} application has been APPROVED!\n"
    if data.claim_date:
        msg += f"\n📅 Claim Date: {data.claim_date}"
    if data.location:
        msg += f"\n📍 Location: {data.location}"
    msg += "\n\nPlease bring a valid ID.\n"
    msg += "\n- OSCA"
    return truncate_message(msg)


def benefit_rejection(data: BenefitPayload) -> str:
    msg = "❌ BENEFIT UPDATE\n\n"
    msg += f"Dear {data.senior_name},\n\n"
    msg += f"Your {data.benefit_type} application requires review.\n"
    msg += "\nPlease visit the OSCA office for more information.\n"
    msg += "\n- OSCA"
    return truncate_message(msg)


def document_ready(data: DocumentPayload) -> str:
    msg = "✅ DOCUMENT READY\n\n"
    msg += f"Dear {data.senior_name},\n\n"
    msg += f"Your {data.document_type} is ready for pickup!\n"
    if data.claim_date:
        msg += f"\n📅 Available: {data.claim_date}"
    if data.location:
        msg += f"\n📍 Location: {data.location}"
    msg += "\n\nPlease bring a valid ID.\n"
    msg += "\n- OSCA"
    return truncate_message(msg)


def document_rejection(data: DocumentPayload) -> str:
    msg = "❌ DOCUMENT UPDATE\n\n"
    msg += f"Dear {data.senior_name},\n\n"
    msg += f"Your {data.document_type} request requires additional information.\n"
    msg += "\nPlease visit the OSCA office.\n"
    msg += "\n- OSCA"
    return truncate_message(msg)


_DOCUMENT_STATUS_LINES = {
    "pending": "Your document request has been submitted and is pending approval.",
    "approved": "Great news! Your document request has been approved and will be processed soon.",
    "in_progress": "Your document request is currently being processed by our staff.",
    "completed": "Your document request has been completed and is ready for pickup.",
    "ready_for_pickup": "Your document is ready for pickup at the OSCA office.",
    "cancelled": "Your document request has been cancelled. Please contact OSCA for more information.",
}


def document_status_update(senior_name: str, status: str, request_id: str) -> str:
    line = _DOCUMENT_STATUS_LINES.get(status) or f"Your document request status has been updated to: {status}"
    return truncate_message(f"Hello {senior_name}, {line} Request ID: {request_id}. - OSCA Pili")


def birthday_greeting(senior_name: str) -> str:
    msg = "🎂 HAPPY BIRTHDAY!\n\n"
    msg += f"Dear {senior_name},\n\n"
    msg += "The OSCA family wishes you a wonderful birthday filled with joy and blessings!\n"
    msg += "\nMay you have many more healthy and happy years ahead.\n"
    msg += "\n- OSCA Management"
    return truncate_message(msg)


def emergency_alert(message: str, location: Optional[str] = None) -> str:
    sms = "🚨 EMERGENCY ALERT\n\n"
    sms += f"{message}\n"
    if location:
        sms += f"\n📍 {location}"
    sms += "\n\nPlease stay safe and follow instructions.\n"
    sms += "\n- OSCA"
    return truncate_message(sms)
