"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

KEY_CODE_LENGTH = 6
KEY_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
KEY_CODE_MAX_ATTEMPTS = 5

DEFAULT_TOKEN_HOURS = 1
MIN_PASSWORD_LENGTH = 6

ALLOWED_PICTURE_EXTENSIONS = {"png", "jpg", "jpeg", "gif"}
