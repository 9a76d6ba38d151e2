from clicker_server.repositories.refresh_token import RefreshTokenRepository
from clicker_server.repositories.save import SaveRepository
from clicker_server.repositories.user import UserRepository

__all__ = [
    "RefreshTokenRepository",
    "SaveRepository",
    "UserRepository",
]
