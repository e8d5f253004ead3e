from app.core.principal import ROLE_ADMIN, ROLE_ORGANIZER

TOURNAMENT_STATUS_UPCOMING = "upcoming"
TOURNAMENT_STATUS_ONGOING = "ongoing"
TOURNAMENT_STATUS_COMPLETED = "completed"
TOURNAMENT_STATUSES = frozenset(
    {
        TOURNAMENT_STATUS_UPCOMING,
        TOURNAMENT_STATUS_ONGOING,
        TOURNAMENT_STATUS_COMPLETED,
    }
)

TOURNAMENT_FORMAT_SINGLE_ELIMINATION = "single-elimination"
TOURNAMENT_FORMAT_DOUBLE_ELIMINATION = "double-elimination"
TOURNAMENT_FORMAT_GROUP_STAGE = "group-stage"
TOURNAMENT_FORMATS = frozenset(
    {
        TOURNAMENT_FORMAT_SINGLE_ELIMINATION,
        TOURNAMENT_FORMAT_DOUBLE_ELIMINATION,
        TOURNAMENT_FORMAT_GROUP_STAGE,
    }
)

TOURNAMENT_NAME_MAX_LENGTH = 100
TOURNAMENT_GAME_NAME_MAX_LENGTH = 50
TOURNAMENT_DESCRIPTION_MAX_LENGTH = 1000
TOURNAMENT_MIN_MAX_PLAYERS = 1

COMPETITOR_PLACEHOLDER_NAME = "Unnamed Team"
COMPETITOR_NAME_MAX_LENGTH = 100
COMPETITOR_DESCRIPTION_MAX_LENGTH = 1000
COMPETITOR_MAIL_MAX_LENGTH = 254
URL_MAX_LENGTH = 512

TOURNAMENT_CREATOR_ROLES = frozenset({ROLE_ORGANIZER, ROLE_ADMIN})

TOURNAMENT_LIST_DEFAULT_LIMIT = 10
TOURNAMENT_LIST_MAX_LIMIT = 100
