"""SQLAlchemy Client Repository Implementation"""

from typing import Any, Dict, List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.client_repository import ClientRepository
from src.domain.client import Client
from .patterns import LIKE_ESCAPE, contains_pattern


class SqlAlchemyClientRepository(ClientRepository):
    """SQLAlchemy implementation of ClientRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, client: Client) -> Client:
        self.session.add(client)
        await self.session.flush()
        await self.session.refresh(client)
        return client

    async def get_by_id(self, user_id: str, client_id: str) -> Optional[Client]:
        statement = (
            select(Client)
            .where(Client.id == client_id)
            .where(Client.user_id == user_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def update(self, client: Client) -> Client:
        self.session.add(client)
        await self.session.flush()
        await self.session.refresh(client)
        return client

    async def find_ids_by_name(self, user_id: str, name_fragment: str) -> List[str]:
        """
        Find client IDs whose name contains the fragment (case-insensitive)

        Args:
            user_id: Owner of the clients
            name_fragment: Substring to match

        Returns:
            List of matching client IDs
        """
        statement = (
            select(Client.id)
            .where(Client.user_id == user_id)
            .where(Client.name.ilike(contains_pattern(name_fragment), escape=LIKE_ESCAPE))
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_rows_by_ids(self, client_ids: List[str]) -> List[Dict[str, Any]]:
        if not client_ids:
            return []
        statement = select(Client).where(Client.id.in_(client_ids))
        result = await self.session.execute(statement)
        return [client.model_dump() for client in result.scalars().all()]
