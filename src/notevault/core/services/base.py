"""Transaction handling shared by the services."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ConflictError, DatabaseError
from ..logging import get_logger

logger = get_logger("services")


class BaseService:
    """Owns the unit of work of one request session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def transaction(
        self, conflict_message: str = "Resource already exists", conflict_status: Optional[int] = None
    ) -> AsyncIterator[None]:
        """Commit on success, roll back everything on any failure.

        Unique-constraint violations surface as ``ConflictError``, other
        database failures as ``DatabaseError``. ``conflict_status`` overrides
        the conflict's 409 where an endpoint answers differently.
        """
        try:
            yield
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.info("Integrity violation rolled back", extra={"error_type": type(exc.orig).__name__})
            raise ConflictError(conflict_message, status_code=conflict_status) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise DatabaseError() from exc
        except BaseException:
            await self.session.rollback()
            raise
