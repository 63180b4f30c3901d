"""
Short code generation strategies for URL shortener.
Uses Strategy Pattern to allow different generation algorithms.
"""

import string
import secrets
from abc import ABC, abstractmethod
from typing import Callable


# URL-safe alphabet, same character set nanoid uses
URL_SAFE_ALPHABET = string.ascii_letters + string.digits + "_-"


class ShortCodeGenerationError(Exception):
    """Raised when no free short code could be produced"""


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    @abstractmethod
    def generate(self, is_taken: Callable[[str], bool]) -> str:
        """
        Generate a short code.

        Args:
            is_taken: Predicate telling whether a candidate code is unavailable
                      (already stored or reserved)

        Returns:
            A short code string that was free at the time of the check
        """
        pass


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random generation strategy.
    Generates a random string and checks it against existing codes.

    Pros: Simple, unpredictable
    Cons: Collision risk grows with the number of stored links
    """

    def __init__(self, length: int = 6, max_retries: int = 5):
        self.length = length
        self.max_retries = max_retries
        self.characters = URL_SAFE_ALPHABET

    def generate(self, is_taken: Callable[[str], bool]) -> str:
        """Generate random short code with collision checking"""
        for attempt in range(self.max_retries):
            short_code = self._generate_random_string()

            if not is_taken(short_code):
                return short_code

        raise ShortCodeGenerationError(
            f"Could not generate unique short code after {self.max_retries} attempts"
        )

    def _generate_random_string(self) -> str:
        """Generate a random string of specified length"""
        return ''.join(secrets.choice(self.characters) for _ in range(self.length))
