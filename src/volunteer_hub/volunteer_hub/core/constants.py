"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7

# Trailing window used to count a volunteer's recent absences.
ABSENCE_WINDOW_DAYS = 90

# Escalation tiers (recent absence count -> penalty).
WARNING_ABSENCES = 3
RESTRICTION_ABSENCES = 5
SUSPENSION_ABSENCES = 7

RESTRICTION_DAYS = 30
SUSPENSION_DAYS = 60

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 8
MIN_CERTIFICATE_TITLE_LENGTH = 3
MIN_POST_TITLE_LENGTH = 3
MIN_POST_DESCRIPTION_LENGTH = 10

# Newest published posts returned by the public listing.
POST_LIST_LIMIT = 100
