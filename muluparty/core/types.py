"""Core data types for the muluparty application."""

from typing import Any, Dict, List, Optional, TypedDict, Union  # noqa: UP035


class UserDocument(TypedDict):
    """A user document as stored in 'allUsers'."""

    associatedTeams: List[str]  # noqa: UP006


class TeamDocument(TypedDict):
    """A team document as stored in 'allTeams'."""

    name: str
    joinCode: str
    participantIdentifiers: List[str]  # noqa: UP006
    completedChallenges: Dict[str, List[str]]  # noqa: UP006
    associatedTournament: str
    additionalPoints: int


class TournamentDocument(TypedDict):
    """A tournament document as stored in 'allTournaments'."""

    name: str
    startDate: str
    endDate: str
    teamIdentifiers: List[str]  # noqa: UP006


class MediaDocument(TypedDict):
    """The media reference embedded in a challenge document."""

    link: str
    type: str


class ChallengeDocument(TypedDict):
    """A challenge document as stored in 'allChallenges'."""

    title: str
    prompt: str
    datePosted: str
    pointValue: int
    media: Union[str, MediaDocument]


class APIResponse(TypedDict):
    """Generic API response structure."""

    success: bool
    message: str
    data: Optional[Dict[str, Any]]  # noqa: UP006
