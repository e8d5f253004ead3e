from app.tournaments.management import (
    create_tournament,
    delete_tournament,
    update_tournament,
    update_tournament_status,
)
from app.tournaments.queries import (
    get_competitor,
    get_tournament_view,
    list_competitor_games,
    list_competitors,
    list_participants,
    list_tournaments,
)
from app.tournaments.registration import register_competitor
from app.tournaments.transactions import run_in_transaction
from app.tournaments.withdrawal import withdraw_competitor

__all__ = [
    "create_tournament",
    "delete_tournament",
    "get_competitor",
    "get_tournament_view",
    "list_competitor_games",
    "list_competitors",
    "list_participants",
    "list_tournaments",
    "register_competitor",
    "run_in_transaction",
    "update_tournament",
    "update_tournament_status",
    "withdraw_competitor",
]
