from core.services.user_data_service import UserDataService
from core.services.auth_service import AuthService, find_demo_account

__all__ = [
    "UserDataService",
    "AuthService",
    "find_demo_account",
]
