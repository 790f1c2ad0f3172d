"""Authentication Service Interface

The application never performs login or token refresh itself; it only asks
the hosted auth provider whether a session is present and who owns it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthSession:
    """Session of the signed-in user"""

    user_id: str
    access_token: Optional[str] = None
    email: Optional[str] = None


class AuthService(ABC):
    """
    Service interface for the auth collaborator

    get_session() is a synchronous read of an already resolved session.
    """

    @abstractmethod
    def get_session(self) -> Optional[AuthSession]:
        """
        Return the current session

        Returns:
            AuthSession if signed in, None otherwise
        """
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        """End the current session with the provider"""
        pass
