from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.database import get_db
from app.exceptions import AuthenticationError
from app.models.user import User
from app.services.topic_service import get_user
import logging

logger = logging.getLogger(__name__)


async def get_current_user(
    x_user_id: Optional[int] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the acting user from the X-User-Id header."""
    if x_user_id is None:
        logger.debug("Request without X-User-Id header")
        raise AuthenticationError()
    return await get_user(db, x_user_id)
