"""Constants for dish matching and quote pricing."""

# Post-parse suggestions for unmatched dish lines
SUGGESTION_THRESHOLD = 0.35
SUGGESTION_LIMIT = 3

# Live-typing autocomplete
AUTOCOMPLETE_THRESHOLD = 0.30
AUTOCOMPLETE_LIMIT = 5
AUTOCOMPLETE_MIN_LENGTH = 2

# Reserved catalog ids for the auxiliary fee lines
TABLE_INOX_ID = "BAN-001"
TABLE_EVENT_ID = "BAN-002"
FRAME_ID = "BAN-003"
STAFF_ID = "NV-001"

RESERVED_IDS = (TABLE_INOX_ID, TABLE_EVENT_ID, FRAME_ID, STAFF_ID)

# Fallback (selling, cost) when a reserved id is missing from the catalog
DEFAULT_TABLE_INOX_PRICE = (250000, 250000)
DEFAULT_TABLE_EVENT_PRICE = (500000, 500000)
DEFAULT_FRAME_PRICE = (450000, 400000)
DEFAULT_STAFF_PRICE = (350000, 300000)

# One event frame covers two tables
TABLES_PER_FRAME = 2
