"""
Trip roles and shared enumerations
Defines the member roles a trip can grant, which role sets guard each kind of
operation, and the enumerated values stored in the managed database.
"""

from typing import Dict, List

# Member roles, highest privilege first
TRIP_ROLES = {
    "admin": "Full control, including deleting the trip and managing members",
    "editor": "Can edit trip details, itinerary, cities and notes",
    "contributor": "Can add itinerary items, sections and notes",
    "viewer": "Read-only access",
}

ADMIN = "admin"
EDITOR = "editor"
CONTRIBUTOR = "contributor"
VIEWER = "viewer"

# Role sets checked by trip-scoped routes
READ_ROLES: List[str] = [ADMIN, EDITOR, CONTRIBUTOR, VIEWER]
WRITE_ROLES: List[str] = [ADMIN, EDITOR, CONTRIBUTOR]
EDIT_ROLES: List[str] = [ADMIN, EDITOR]
ADMIN_ROLES: List[str] = [ADMIN]

PRIVACY_SETTINGS = ["private", "shared_with_link", "public"]

# Non-members get read-only access to trips with these privacy settings
LINK_READABLE_PRIVACY = ["public", "shared_with_link"]

TRIP_STATUSES = ["planning", "upcoming", "in_progress", "completed", "cancelled"]

ITEM_STATUSES = ["suggested", "confirmed", "rejected"]

ITEM_TYPES = ["activity", "accommodation", "transportation", "food", "place", "note", "other"]

CONTENT_TYPES = ["trip", "itinerary_item", "destination", "group_plan_idea", "collection", "template"]

GROUP_VISIBILITY = ["private", "public", "unlisted"]
GROUP_ROLES = ["admin", "member"]

IDEA_TYPES = ["activity", "budget", "date", "destination", "note", "other", "place", "question"]
VOTE_TYPES = ["up", "down"]

FORM_STATUSES = ["draft", "published", "archived"]
FORM_VISIBILITY = ["private", "members", "public"]
FORM_TYPES = ["general", "accommodation", "transportation", "activities", "food", "feedback", "custom"]

# Hosts accepted for trip playlist links
PLAYLIST_DOMAINS = [
    "spotify.com",
    "music.apple.com",
    "youtube.com",
    "youtu.be",
    "soundcloud.com",
    "tidal.com",
]

# Rough length of stay per continent, used by the trending destinations sort
CONTINENT_AVG_DAYS: Dict[str, int] = {
    "Europe": 5,
    "Asia": 7,
    "North America": 6,
    "South America": 8,
    "Africa": 8,
    "Oceania": 9,
}
DEFAULT_AVG_DAYS = 5
