"""
Event names and parameter keys written by the session logger.
"""

# --- EVENT NAMES ---
EVENT_NAME_ACTIVATED_APP = "activate_app"
EVENT_NAME_DEACTIVATED_APP = "deactivate_app"

# --- PARAMETER KEYS ---
EVENT_NAME_SESSION_INTERRUPTIONS = "app_interruptions"
EVENT_NAME_TIME_BETWEEN_SESSIONS = "time_between_sessions"
EVENT_PARAM_SOURCE_APPLICATION = "_source_application"
EVENT_PARAM_PACKAGE_FP = "package_fp"
EVENT_PARAM_APP_CERT_HASH = "app_cert_hash"
LOG_TIME_APP_EVENT_KEY = "_logTime"

# Attribution sentinel when the session has no source application
UNCLASSIFIED = "Unclassified"

# Key-value namespace shared by everything the logger persists
APP_EVENT_PREFERENCES = "app_event_preferences"
