"""
Feature Flags - Easy on/off toggle for features.
Change values here to enable/disable functionality.
"""

import os


class Features:
    """Feature toggles - set via env vars or defaults"""

    # === AUTH ===
    # Fall back to the demo allow-list when the backend is unreachable
    MOCK_AUTH_ENABLED: bool = os.getenv("MOCK_AUTH_ENABLED", "true").lower() == "true"
    # Skip the backend entirely and start in local mock mode
    FORCE_LOCAL_MODE: bool = os.getenv("FORCE_LOCAL_MODE", "false").lower() == "true"

    # === ACTION LOG ===
    ACTION_LOG_ENABLED: bool = os.getenv("ACTION_LOG_ENABLED", "true").lower() == "true"
    ACTION_LOG_LIMIT: int = int(os.getenv("ACTION_LOG_LIMIT", "100"))

    # === DEBUG ===
    DEBUG_MODE: bool = os.getenv("DEBUG", "false").lower() == "true"

    @classmethod
    def to_dict(cls) -> dict:
        """Get all features as dict (useful for logging)"""
        return {
            "mock_auth_enabled": cls.MOCK_AUTH_ENABLED,
            "force_local_mode": cls.FORCE_LOCAL_MODE,
            "action_log_enabled": cls.ACTION_LOG_ENABLED,
            "action_log_limit": cls.ACTION_LOG_LIMIT,
            "debug_mode": cls.DEBUG_MODE,
        }


# Shortcut
features = Features()
