from .entities import Base, Person, PersonYear, Praline, Rating
from .person import (
    EnrichedPerson,
    ParticipationUpdate,
    PersonCreate,
    PersonPatch,
    PersonRead,
    PersonYearRead,
    StatusMessage,
)
from .praline import PralineCreate, PralinePatch, PralineRead
from .rating import FeedbackUpdate, Progress, RatingRead, RatingResult, RatingSubmission, SessionView
from .user import User
from .years import AvailableYears

__all__ = [
    "AvailableYears",
    "Base",
    "EnrichedPerson",
    "FeedbackUpdate",
    "ParticipationUpdate",
    "Person",
    "PersonCreate",
    "PersonPatch",
    "PersonRead",
    "PersonYear",
    "PersonYearRead",
    "Praline",
    "PralineCreate",
    "PralinePatch",
    "PralineRead",
    "Progress",
    "Rating",
    "RatingRead",
    "RatingResult",
    "RatingSubmission",
    "SessionView",
    "StatusMessage",
    "User",
]
