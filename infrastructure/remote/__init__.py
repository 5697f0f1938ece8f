from infrastructure.remote.server_client import ServerClient

__all__ = [
    "ServerClient",
]
