"""
URL store strategies using Strategy Pattern.

The store owns both mappings of the service:
- short code -> ShortLink (original URL, created, expiry)
- short code -> ClickStats (click counter + ordered click events)

Both are created together and removed together, under the same key.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional
import threading

from shorturl_app.models.url import ShortLink, ClickEvent, ClickStats


class URLStoreStrategy(ABC):
    """
    Abstract base class for URL store strategies.

    Operations are synchronous: every implementation must make
    add() (check-then-insert) and record_click() (increment + append)
    atomic with respect to concurrent callers.
    """

    @abstractmethod
    def add(self, link: ShortLink) -> bool:
        """
        Insert a link with empty click stats, only if the code is free.

        Args:
            link: ShortLink to insert

        Returns:
            True if inserted, False if the code already exists
        """
        pass

    @abstractmethod
    def exists(self, code: str) -> bool:
        """Check if a short code is present (expired or not)"""
        pass

    @abstractmethod
    def get_link(self, code: str) -> Optional[ShortLink]:
        """Get link by short code, or None"""
        pass

    @abstractmethod
    def get_stats(self, code: str) -> Optional[ClickStats]:
        """
        Get a consistent snapshot of the click stats for a code.

        The returned object is a copy; mutating it does not affect the store.
        """
        pass

    @abstractmethod
    def record_click(self, code: str, event: ClickEvent) -> Optional[int]:
        """
        Increment the click counter and append the event atomically.

        Returns:
            New total click count, or None if the code is unknown
        """
        pass

    @abstractmethod
    def delete(self, code: str) -> bool:
        """Remove a link and its stats. Returns False if it didn't exist"""
        pass

    @abstractmethod
    def purge_expired(self, now: datetime, retention: timedelta) -> List[str]:
        """
        Remove links whose expiry + retention is before now.

        Returns:
            Codes that were removed
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove everything"""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


@dataclass
class _Entry:
    link: ShortLink
    stats: ClickStats = field(default_factory=ClickStats)
    lock: threading.Lock = field(default_factory=threading.Lock)


class InMemoryURLStore(URLStoreStrategy):
    """
    In-memory URL store using a Python dict.

    Locking:
    - one store-level lock guards the dict itself (insert/delete/purge)
    - one lock per entry guards its ClickStats (increment + append, snapshot)

    Redirects for different codes never contend on the same entry lock.
    Lost on restart (process lifetime only).
    """

    def __init__(self):
        """Initialize empty store"""
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def add(self, link: ShortLink) -> bool:
        with self._lock:
            if link.code in self._entries:
                return False
            self._entries[link.code] = _Entry(link=link)
            return True

    def exists(self, code: str) -> bool:
        return code in self._entries

    def get_link(self, code: str) -> Optional[ShortLink]:
        entry = self._entries.get(code)
        return entry.link if entry else None

    def get_stats(self, code: str) -> Optional[ClickStats]:
        entry = self._entries.get(code)
        if entry is None:
            return None
        with entry.lock:
            return ClickStats(
                clicks=entry.stats.clicks,
                click_data=list(entry.stats.click_data),
            )

    def record_click(self, code: str, event: ClickEvent) -> Optional[int]:
        entry = self._entries.get(code)
        if entry is None:
            return None
        with entry.lock:
            entry.stats.record(event)
            return entry.stats.clicks

    def delete(self, code: str) -> bool:
        with self._lock:
            return self._entries.pop(code, None) is not None

    def purge_expired(self, now: datetime, retention: timedelta) -> List[str]:
        with self._lock:
            expired = [
                code for code, entry in self._entries.items()
                if entry.link.expiry + retention < now
            ]
            for code in expired:
                del self._entries[code]
        return expired

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
