"""Client Repository Interface"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from src.domain.client import Client


class ClientRepository(ABC):
    """Repository interface for Client persistence"""

    @abstractmethod
    async def create(self, client: Client) -> Client:
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str, client_id: str) -> Optional[Client]:
        pass

    @abstractmethod
    async def update(self, client: Client) -> Client:
        pass

    @abstractmethod
    async def find_ids_by_name(self, user_id: str, name_fragment: str) -> List[str]:
        """
        Find client IDs whose name contains the fragment (case-insensitive)

        Args:
            user_id: Owner of the clients
            name_fragment: Substring to match

        Returns:
            List of matching client IDs
        """
        pass

    @abstractmethod
    async def get_rows_by_ids(self, client_ids: List[str]) -> List[Dict[str, Any]]:
        """Retrieve raw client rows for the given IDs"""
        pass
