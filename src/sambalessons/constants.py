# -*- coding: utf-8 -*-
"""Application constants."""

APP_NAME = "samba-lessons"
APP_VERSION = "0.1.0"

DEFAULT_SETTINGS_FILE = "settings.json"
DEFAULT_PREFERENCES_FILE = "samba_prefs.json"
DEFAULT_MEDIA_DIR = "media"

# Returned instead of a uid when nobody is signed in. Never a real key.
SENTINEL_UID = "unknown"

ROLE_INSTRUCTOR = "Instructor"
ROLE_SYNONYMS = {
    "guide": ROLE_INSTRUCTOR,
    "instructor": ROLE_INSTRUCTOR,
}

LEVELS = ("Beginners", "Advanced", "Expert")
LEVEL_ALIASES = {
    "beginner": "Beginners",
    "beginners": "Beginners",
    "advanced": "Advanced",
    "expert": "Expert",
}

# Local preference set names
SET_FAVORITES = "favorite_lessons"
SET_CREATED = "created_lessons"
SET_WATCHED = "watched_lessons"
USER_FAVORITES_PREFIX = "favorites_"

# Local preference scalar names
KEY_USER_NAME = "user_name"
KEY_USER_AGE = "user_age"
KEY_USER_EMAIL = "user_email"
KEY_USER_ROLE = "user_role"
KEY_USER_IS_INSTRUCTOR = "user_is_instructor"
KEY_PROFILE_IMAGE_PREFIX = "profile_image_path_"
KEY_AUTH_UID = "auth_uid"
KEY_AUTH_EMAIL = "auth_email"
KEY_PENDING_MIRROR = "pending_favorite_mirror"

# Remote collections
LESSONS_COLLECTION = "lessons"
USERS_COLLECTION = "users"
FAVORITES_SUBCOLLECTION = "favorites"

DEFAULT_ICON_ID = "icon_image_dance"
DEFAULT_MAX_PARTICIPANTS = 20
VIDEOS_SUBDIR = "videos"
