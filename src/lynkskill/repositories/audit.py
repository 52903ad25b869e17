"""Repository for AuditLog entity."""

from uuid import UUID

from sqlmodel import select

from src.lynkskill.models.audit import AuditLog
from src.lynkskill.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    model = AuditLog

    async def list_by_company(
        self,
        company_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        action: str | None = None,
        user_id: UUID | None = None,
    ) -> tuple[list[AuditLog], str | None, bool]:
        """List audit logs for a company with cursor pagination.

        Args:
            company_id: Company to filter by
            cursor: Pagination cursor
            limit: Maximum items to return
            action: Optional action type filter
            user_id: Optional acting user filter

        Returns:
            Tuple of (logs, next_cursor, has_more)
        """
        query = select(AuditLog).where(AuditLog.company_id == company_id)

        if action:
            query = query.where(AuditLog.action == action)
        if user_id:
            query = query.where(AuditLog.user_id == user_id)

        return await self.paginate(query, cursor, limit, AuditLog.created_at)
