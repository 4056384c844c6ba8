from notifications import templates
from notifications.templates import (
    AnnouncementPayload,
    AppointmentPayload,
    BenefitPayload,
    DocumentPayload,
    message_info,
    truncate_message,
)


def test_message_info_empty():
    info = message_info("")
    assert (info.length, info.sms_count, info.is_valid) == (0, 0, False)
    assert info.as_dict() == {"length": 0, "smsCount": 0, "isValid": False}


def test_message_info_segments():
    assert message_info("a" * 160).sms_count == 1
    assert message_info("a" * 161).sms_count == 2
    assert message_info("a" * 1600).is_valid
    assert not message_info("a" * 1601).is_valid


def test_truncate_message():
    assert truncate_message("short") == "short"
    out = truncate_message("x" * 2000)
    assert len(out) == 1600
    assert out.endswith("...")
    assert out[:1597] == "x" * 1597


def test_long_announcement_is_truncated():
    msg = templates.announcement(AnnouncementPayload(title="Payout", description="d" * 3000))
    assert len(msg) == 1600
    assert msg.endswith("...")


def test_announcement_contains_fields_and_skips_missing_location():
    msg = templates.announcement(
        AnnouncementPayload(title="Social Pension Payout", description="Bring your OSCA ID.", date="2026-11-02")
    )
    assert "Social Pension Payout" in msg
    assert "Bring your OSCA ID." in msg
    assert "Date: 2026-11-02" in msg
    assert "Location:" not in msg
    assert "Time:" not in msg
    assert msg.endswith("- OSCA Management")


def test_announcement_with_location_and_barangay():
    msg = templates.announcement(
        AnnouncementPayload(title="T", description="D", location="Municipal Gym", barangay="San Jose")
    )
    assert "📍 Location: Municipal Gym" in msg
    assert "Barangay: San Jose" in msg


def test_appointment_templates():
    p = AppointmentPayload(senior_name="Juan Dela Cruz", date="Nov 3", time="9:00 AM", purpose="ID renewal")
    reminder = templates.appointment_reminder(p)
    assert reminder.startswith("📅 APPOINTMENT REMINDER")
    assert "Dear Juan Dela Cruz," in reminder
    assert "📋 Purpose: ID renewal" in reminder
    assert "Please arrive 10 minutes early." in reminder
    assert "📍" not in reminder

    confirmed = templates.appointment_confirmation(
        AppointmentPayload(senior_name="Juan", date="Nov 3", time="9:00 AM", purpose="ID renewal", location="OSCA Office")
    )
    assert "✅ APPOINTMENT CONFIRMED" in confirmed
    assert "📋 ID renewal" in confirmed
    assert "📍 OSCA Office" in confirmed


def test_benefit_templates():
    p = BenefitPayload(senior_name="Maria", benefit_type="Social Pension", status="approved", claim_date="Nov 5")
    assert "Your Social Pension application has been APPROVED!" in templates.benefit_approval(p)
    assert "Claim Date: Nov 5" in templates.benefit_approval(p)
    assert "requires review" in templates.benefit_rejection(p)


def test_document_templates():
    p = DocumentPayload(senior_name="Maria", document_type="OSCA ID", status="ready")
    ready = templates.document_ready(p)
    assert "Your OSCA ID is ready for pickup!" in ready
    assert "Available:" not in ready
    assert "requires additional information" in templates.document_rejection(p)


def test_document_status_update():
    msg = templates.document_status_update("Maria", "ready_for_pickup", "REQ-1")
    assert msg == "Hello Maria, Your document is ready for pickup at the OSCA office. Request ID: REQ-1. - OSCA Pili"
    assert "updated to: on_hold" in templates.document_status_update("Maria", "on_hold", "REQ-2")


def test_birthday_and_emergency():
    assert "Dear Lola Nena," in templates.birthday_greeting("Lola Nena")
    alert = templates.emergency_alert("Typhoon signal no. 3")
    assert alert.startswith("🚨 EMERGENCY ALERT")
    assert "📍" not in alert
    assert "📍 Evacuation center" in templates.emergency_alert("Flood", "Evacuation center")
