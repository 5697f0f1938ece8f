"""
Domain constants - storage keys, demo accounts and other static data.
Centralized here for easy modification.
"""

# === Local storage keys ===
USER_DATA_KEY_PREFIX = "sportsbuddy_user_data_"
MOCK_USER_KEY = "mockUser"
ACTION_LOG_KEY = "sportsBuddyLogs"

# === Remote endpoints ===
# Endpoints the backend serves without a user session
PUBLIC_ENDPOINTS = ("/health", "/signup", "/reset-password")

# Status used for synthetic "backend unavailable" results
SERVICE_UNAVAILABLE = 503

# === Mock auth ===
MOCK_USER_ID_PREFIX = "mock-user-"
AVATAR_URL_TEMPLATE = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"

# Demo accounts accepted when running without the backend
DEMO_ACCOUNTS = [
    {
        "email": "demo@sportsbuddy.com",
        "password": "demo123",
        "profile": {
            "id": "demo-user-1",
            "name": "Demo User",
            "email": "demo@sportsbuddy.com",
            "avatarUrl": AVATAR_URL_TEMPLATE.format(seed="demo"),
            "bio": "Sports enthusiast and fitness lover",
            "sports": ["Tennis", "Basketball"],
            "skillLevel": "intermediate",
            "location": "San Francisco, CA",
            "preferredDays": ["weekends"],
            "preferredTimes": ["morning"],
            "isAdmin": False,
            "joinedDate": "2024-01-15",
        },
    },
    {
        "email": "admin@sportsbuddy.com",
        "password": "admin123",
        "profile": {
            "id": "admin-user-1",
            "name": "Admin User",
            "email": "admin@sportsbuddy.com",
            "avatarUrl": AVATAR_URL_TEMPLATE.format(seed="admin"),
            "bio": "Platform administrator",
            "sports": ["Soccer", "Running"],
            "skillLevel": "advanced",
            "location": "New York, NY",
            "preferredDays": ["weekdays"],
            "preferredTimes": ["evening"],
            "isAdmin": True,
            "joinedDate": "2024-01-01",
        },
    },
]
