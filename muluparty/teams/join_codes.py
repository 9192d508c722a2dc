"""Two-word join codes drawn from a static word list."""

from __future__ import annotations

import os
import secrets

from muluparty.core.constants import JOIN_CODE_MAX_WORD_LENGTH, JOIN_CODE_WORD_COUNT
from muluparty.errors import AppError

DEFAULT_WORDS_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "resources", "words.txt"
)


class JoinCodeGenerator:
    """Builds codes like ``"maple orbit"`` from a newline-delimited word list.

    A sampled word is kept only if it is short and already lowercase;
    otherwise another word is drawn. Codes are not checked for uniqueness
    here.
    """

    def __init__(
        self,
        words_path: str | None = None,
        max_word_length: int = JOIN_CODE_MAX_WORD_LENGTH,
    ) -> None:
        """Configure the word source."""
        self.words_path = words_path or DEFAULT_WORDS_PATH
        self.max_word_length = max_word_length

    def load_words(self) -> list[str]:
        """Read the word list, one word per line."""
        try:
            with open(self.words_path, encoding="utf-8") as f:
                return [line.strip() for line in f.read().splitlines()]
        except OSError as e:
            raise AppError(f"Unable to read the join code word list. ({e})", 500) from e

    def is_acceptable(self, word: str) -> bool:
        """Whether a word may appear in a join code."""
        return (
            0 < len(word) <= self.max_word_length
            and word.isascii()
            and word.isalpha()
            and word.islower()
        )

    def generate(self) -> str:
        """Return a new join code."""
        words = self.load_words()
        if not any(self.is_acceptable(word) for word in words):
            raise AppError("The join code word list has no usable words.", 500)

        chosen: list[str] = []
        while len(chosen) < JOIN_CODE_WORD_COUNT:
            word = secrets.choice(words)
            while not self.is_acceptable(word):
                word = secrets.choice(words)
            chosen.append(word)
        return " ".join(chosen)
