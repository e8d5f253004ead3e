from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.tournaments import Tournament


class TournamentsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, tournament: Tournament) -> Tournament:
        session.add(tournament)
        await session.flush()
        return tournament

    @staticmethod
    async def get_by_id(session: AsyncSession, tournament_id: UUID) -> Tournament | None:
        return await session.get(Tournament, tournament_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, tournament_id: UUID) -> Tournament | None:
        stmt = (
            select(Tournament)
            .where(Tournament.id == tournament_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_filtered(
        session: AsyncSession,
        *,
        status: str | None,
        game_name: str | None,
        offset: int,
        limit: int,
        search: str | None = None,
        organizer_id: str | None = None,
    ) -> tuple[list[Tournament], int]:
        conditions = []
        if status is not None:
            conditions.append(Tournament.status == status)
        if game_name is not None:
            conditions.append(Tournament.game_name == game_name)
        if organizer_id is not None:
            conditions.append(Tournament.organizer_id == organizer_id)
        if search is not None:
            conditions.append(Tournament.name.icontains(search, autoescape=True))

        count_stmt = select(func.count(Tournament.id)).where(*conditions)
        total = int((await session.execute(count_stmt)).scalar_one() or 0)

        stmt = (
            select(Tournament)
            .where(*conditions)
            .order_by(Tournament.created_at.desc(), Tournament.id.desc())
            .offset(max(0, int(offset)))
            .limit(max(1, int(limit)))
        )
        result = await session.execute(stmt)
        return list(result.scalars().all()), total

    @staticmethod
    async def delete(session: AsyncSession, *, tournament: Tournament) -> None:
        await session.delete(tournament)
        await session.flush()
