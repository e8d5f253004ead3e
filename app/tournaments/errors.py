class TournamentError(Exception):
    code = "TOURNAMENT_ERROR"
    message = "Tournament operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidIdentifierError(TournamentError):
    code = "INVALID_IDENTIFIER"
    message = "Invalid tournament ID"


class TournamentNotFoundError(TournamentError):
    code = "NOT_FOUND"
    message = "Tournament not found"


class CompetitorNotFoundError(TournamentError):
    code = "NOT_FOUND"
    message = "Competitor not found"


class RegistrationClosedError(TournamentError):
    code = "REGISTRATION_CLOSED"
    message = "Tournament is not open for registration"


class TournamentFullError(TournamentError):
    code = "TOURNAMENT_FULL"
    message = "Tournament is full"


class AlreadyRegisteredError(TournamentError):
    code = "ALREADY_REGISTERED"
    message = "You are already registered for this tournament"


class MissingTeamNameError(TournamentError):
    code = "MISSING_TEAM_NAME"
    message = "Team name is required"


class MismatchedOwnershipError(TournamentError):
    code = "MISMATCHED_OWNERSHIP"
    message = "Competitor does not belong to this tournament"


class TournamentForbiddenError(TournamentError):
    code = "FORBIDDEN"
    message = "You are not allowed to modify this tournament"


class TournamentValidationError(TournamentError):
    code = "VALIDATION_FAILED"
    message = "Validation failed"

    def __init__(self, errors: list[str]) -> None:
        super().__init__()
        self.errors = list(errors)


class TransactionConflictError(TournamentError):
    code = "TRANSACTION_CONFLICT"
    message = "Tournament was modified concurrently, please retry"


class StoreUnavailableError(TournamentError):
    code = "UNAVAILABLE"
    message = "Tournament store is temporarily unavailable, please retry"


class PersistenceError(TournamentError):
    code = "SERVER_ERROR"
    message = "Server error while processing the tournament request"
