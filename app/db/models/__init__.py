from app.db.models.competitors import Competitor
from app.db.models.matches import Match
from app.db.models.tournaments import Tournament

__all__ = [
    "Competitor",
    "Match",
    "Tournament",
]
