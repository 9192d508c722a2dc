"""Data models for challenges."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Optional


@dataclass
class ChallengeMedia:
    """A link to media shown with a challenge."""

    link: str
    type: str


@dataclass
class Challenge:
    """A challenge teams complete for points."""

    id: str
    title: str
    prompt: str
    date_posted: datetime.datetime
    point_value: int
    media: Optional[ChallengeMedia] = None
