from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.matches import Match


class MatchesRepo:
    @staticmethod
    async def create(session: AsyncSession, *, match: Match) -> Match:
        session.add(match)
        await session.flush()
        return match

    @staticmethod
    async def delete_for_tournament(session: AsyncSession, *, tournament_id: UUID) -> int:
        stmt = (
            delete(Match)
            .where(Match.tournament_id == tournament_id)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return int(result.rowcount or 0)
