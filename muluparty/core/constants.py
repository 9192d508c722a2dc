"""Global constants for the muluparty application."""

# Collection names
USERS_COLLECTION = "allUsers"
TEAMS_COLLECTION = "allTeams"
TOURNAMENTS_COLLECTION = "allTournaments"
CHALLENGES_COLLECTION = "allChallenges"

# Fields of 'allUsers' documents
USER_ASSOCIATED_TEAMS = "associatedTeams"

# Fields of 'allTeams' documents
TEAM_NAME = "name"
TEAM_JOIN_CODE = "joinCode"
TEAM_PARTICIPANTS = "participantIdentifiers"
TEAM_COMPLETED_CHALLENGES = "completedChallenges"
TEAM_ASSOCIATED_TOURNAMENT = "associatedTournament"
TEAM_ADDITIONAL_POINTS = "additionalPoints"

# Fields of 'allTournaments' documents
TOURNAMENT_NAME = "name"
TOURNAMENT_START_DATE = "startDate"
TOURNAMENT_END_DATE = "endDate"
TOURNAMENT_TEAMS = "teamIdentifiers"

# Fields of 'allChallenges' documents
CHALLENGE_TITLE = "title"
CHALLENGE_PROMPT = "prompt"
CHALLENGE_DATE_POSTED = "datePosted"
CHALLENGE_POINT_VALUE = "pointValue"
CHALLENGE_MEDIA = "media"
MEDIA_TYPES = ("autoPlayVideo", "gif", "linkedVideo", "staticImage")

# Encoding
SENTINEL = "!"
DELIMITER = "–"
ALTERNATE_DELIMITER = "—"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
EMPTY_POINTS_ENTRY = f"{SENTINEL} {DELIMITER} 0"

# Join codes
JOIN_CODE_WORD_COUNT = 2
JOIN_CODE_MAX_WORD_LENGTH = 6
JOIN_CODE_MAX_ATTEMPTS = 5

# Fan-out
FANOUT_MAX_WORKERS = 8

DEFAULT_SETTINGS = {
    "FANOUT_MAX_WORKERS": FANOUT_MAX_WORKERS,
    "JOIN_CODE_MAX_ATTEMPTS": JOIN_CODE_MAX_ATTEMPTS,
    "JOIN_CODE_WORDS_PATH": None,
}
