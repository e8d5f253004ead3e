from app.db.repo.competitors_repo import CompetitorsRepo
from app.db.repo.matches_repo import MatchesRepo
from app.db.repo.tournaments_repo import TournamentsRepo

__all__ = [
    "CompetitorsRepo",
    "MatchesRepo",
    "TournamentsRepo",
]
