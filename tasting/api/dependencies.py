from __future__ import annotations

from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tasting.api.security import require_admin
from tasting.core.database import database_manager
from tasting.models import User
from tasting.utils.validators import require_signature, require_year


async def get_session() -> AsyncIterator[AsyncSession]:
    async with database_manager.session() as session:
        yield session


async def get_current_admin(user: User = Depends(require_admin)) -> User:
    return user


# Path checks run as dependencies so they are reported ahead of body validation.
def checked_year(year: int) -> int:
    return require_year(year)


def checked_signature(signature: str) -> str:
    return require_signature(signature)
