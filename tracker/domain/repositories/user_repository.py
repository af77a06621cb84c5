from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from tracker.domain.team import User
from tracker.domain.value_objects import UserId


class UserRepository(ABC):
    """
    Read-only access to application users. Rows are created by the
    sign-up flow, which lives outside this service.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def search(self, fragment: str) -> List[User]:
        """
        Users whose username contains fragment (case-insensitive).
        """
        raise NotImplementedError
