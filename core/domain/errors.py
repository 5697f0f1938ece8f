"""
Domain errors.

Remote failures never surface as exceptions (see RemoteResult); the only
failure callers have to catch is a local storage write that did not land.
"""


class StorageError(Exception):
    """Local key-value storage could not persist or remove a value"""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{key}: {message}")
