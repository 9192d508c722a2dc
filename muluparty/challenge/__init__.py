"""Challenges that teams complete for points."""

from .models import Challenge, ChallengeMedia
from .services import ChallengeService

__all__ = ["Challenge", "ChallengeMedia", "ChallengeService"]
