from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from google.cloud.firestore import Client
from google.cloud.firestore_v1.base_query import FieldFilter

from messaging.sms import Recipient
from models.schema import BARANGAY_ALL, COL_SENIOR_CITIZENS, SENIOR_STATUS_ACTIVE
from storage.firestore_client import get_firestore_client

log = logging.getLogger("osca.repos.seniors")


class SeniorRepository:
    def __init__(self, db: Optional[Client] = None):
        self._db = db

    @property
    def db(self) -> Client:
        if self._db is None:
            self._db = get_firestore_client()
        return self._db

    def list_active(self, barangay: Optional[str] = None) -> List[Dict[str, Any]]:
        q = self.db.collection(COL_SENIOR_CITIZENS).where(filter=FieldFilter("status", "==", SENIOR_STATUS_ACTIVE))
        if barangay and barangay != BARANGAY_ALL:
            q = q.where(filter=FieldFilter("barangay", "==", barangay))
        out = []
        for d in q.stream():
            item = d.to_dict() or {}
            item["id"] = d.id
            out.append(item)
        return out

    def recipients(self, barangay: Optional[str] = None) -> List[Recipient]:
        """
        SMS recipients for active seniors, optionally one barangay.
        Emergency contact wins over the senior's own number; seniors with neither are skipped.
        """
        try:
            seniors = self.list_active(barangay)
        except Exception as e:
            log.error(
                "senior_lookup_failed",
                extra={"extra": {"event": "senior_lookup_failed", "barangay": barangay or "", "error_type": type(e).__name__, "message": str(e)}},
                exc_info=True,
            )
            return []

        out: List[Recipient] = []
        for s in seniors:
            phone = str(s.get("emergency_contact_phone") or "").strip() or str(s.get("contact_phone") or "").strip()
            if not phone:
                continue
            name = f"{s.get('first_name') or ''} {s.get('last_name') or ''}".strip()
            out.append(Recipient(phone_number=phone, display_name=name or None))
        return out
