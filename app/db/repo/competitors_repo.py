from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.competitors import Competitor
from app.db.models.tournaments import Tournament


class CompetitorsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, competitor: Competitor) -> Competitor:
        session.add(competitor)
        await session.flush()
        return competitor

    @staticmethod
    async def get_by_id(session: AsyncSession, competitor_id: UUID) -> Competitor | None:
        return await session.get(Competitor, competitor_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, competitor_id: UUID) -> Competitor | None:
        stmt = select(Competitor).where(Competitor.id == competitor_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_for_tournament_user(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        user_id: str,
    ) -> Competitor | None:
        stmt = select(Competitor).where(
            Competitor.tournament_id == tournament_id,
            Competitor.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_ids(
        session: AsyncSession,
        competitor_ids: Sequence[UUID],
    ) -> list[Competitor]:
        ids = tuple(set(competitor_ids))
        if not ids:
            return []
        stmt = select(Competitor).where(Competitor.id.in_(ids))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_filtered(
        session: AsyncSession,
        *,
        game_name: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[Competitor], int]:
        conditions = []
        if game_name is not None:
            conditions.append(
                Competitor.tournament_id.in_(
                    select(Tournament.id).where(Tournament.game_name == game_name)
                )
            )

        count_stmt = select(func.count(Competitor.id)).where(*conditions)
        total = int((await session.execute(count_stmt)).scalar_one() or 0)

        stmt = (
            select(Competitor)
            .where(*conditions)
            .order_by(Competitor.created_at.desc(), Competitor.id.desc())
            .offset(max(0, int(offset)))
            .limit(max(1, int(limit)))
        )
        result = await session.execute(stmt)
        return list(result.scalars().all()), total

    @staticmethod
    async def list_game_names(session: AsyncSession) -> list[str]:
        stmt = (
            select(Tournament.game_name)
            .join(Competitor, Competitor.tournament_id == Tournament.id)
            .where(Tournament.game_name.is_not(None))
            .distinct()
            .order_by(Tournament.game_name.asc())
        )
        result = await session.execute(stmt)
        return [str(game_name) for game_name in result.scalars().all()]

    @staticmethod
    async def delete(session: AsyncSession, *, competitor: Competitor) -> None:
        await session.delete(competitor)

    @staticmethod
    async def delete_for_tournament(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        competitor_ids: Sequence[UUID],
    ) -> int:
        conditions = [Competitor.tournament_id == tournament_id]
        if competitor_ids:
            conditions.append(Competitor.id.in_(tuple(competitor_ids)))
        stmt = (
            delete(Competitor)
            .where(or_(*conditions))
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return int(result.rowcount or 0)
