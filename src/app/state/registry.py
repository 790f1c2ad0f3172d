"""Process-wide registry of invoice workspace states, keyed by user ID"""

import logging
from typing import Dict

from .invoice_state import DEFAULT_PAGE_SIZE, InvoiceWorkspaceState, PaginationState

logger = logging.getLogger(__name__)


class WorkspaceRegistry:
    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        self.page_size = page_size
        self._states: Dict[str, InvoiceWorkspaceState] = {}

    def get(self, user_id: str) -> InvoiceWorkspaceState:
        state = self._states.get(user_id)
        if state is None:
            state = InvoiceWorkspaceState(pagination=PaginationState(page_size=self.page_size))
            self._states[user_id] = state
            logger.debug(f"Created workspace state for user {user_id}")
        return state

    def discard(self, user_id: str) -> None:
        self._states.pop(user_id, None)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._states

    def __len__(self) -> int:
        return len(self._states)
