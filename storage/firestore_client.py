from __future__ import annotations

from functools import lru_cache

from google.cloud import firestore
from config.settings import settings


@lru_cache(maxsize=1)
def get_firestore_client() -> firestore.Client:
    # Empty FIRESTORE_PROJECT_ID falls back to the ADC default project.
    return firestore.Client(project=settings.FIRESTORE_PROJECT_ID or None)
