# Firestore collection and field names shared by repositories.

COL_SENIOR_CITIZENS = "senior_citizens"  # senior_citizens/{senior_id}

SENIOR_STATUS_ACTIVE = "active"
BARANGAY_ALL = "all"
