from clicker_server.models.refresh_token import RefreshToken
from clicker_server.models.save import Save
from clicker_server.models.user import User

__all__ = [
    "RefreshToken",
    "Save",
    "User",
]
