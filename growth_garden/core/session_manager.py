# growth_garden/core/session_manager.py

"""
Manages per-user Growth Garden sessions: auth token, language preference
and the response cache that belongs to them.
"""
import threading
import time
import logging
from collections import OrderedDict
from typing import Callable, Optional, Tuple
from urllib.parse import parse_qs, urlparse

from growth_garden.config import constants
from growth_garden.config.settings import settings
from growth_garden.front_end.cache import ResponseCache

logger = logging.getLogger(__name__)


class GardenSession:
    """
    Holds the auth token, signed-in user and language for one user,
    plus that user's cache of API responses.
    """
    def __init__(
        self,
        token: Optional[str] = None,
        language: Optional[str] = None,
        cache_ttl_seconds: Optional[float] = None,
        on_sign_out: Optional[Callable[[], None]] = None,
    ):
        self.lock = threading.Lock()
        self.token = token
        self.user = None
        self.language = constants.FALLBACK_LANGUAGE
        self.set_language(language or settings.DEFAULT_LANGUAGE)
        ttl = settings.CACHE_TTL_SECONDS if cache_ttl_seconds is None else cache_ttl_seconds
        self.cache = ResponseCache(ttl_seconds=ttl)
        self.on_sign_out = on_sign_out

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def set_token(self, token: str) -> None:
        with self.lock:
            self.token = token

    def clear_token(self) -> None:
        """
        Signs the session out locally: token, user and cached responses are
        dropped, and the owner (if any) is told via on_sign_out.
        """
        with self.lock:
            self.token = None
            self.user = None
        self.cache.clear()
        if self.on_sign_out is not None:
            self.on_sign_out()

    def capture_oauth_token(self, callback_url: str) -> Optional[str]:
        """
        Reads the `token` query parameter an OAuth redirect lands with and
        stores it. Returns the token, or None when the URL carries none.
        """
        values = parse_qs(urlparse(callback_url).query).get("token")
        if not values or not values[0]:
            return None
        self.set_token(values[0])
        logger.info("Captured auth token from OAuth callback")
        return values[0]

    def set_language(self, language: str) -> bool:
        """Switches language if supported. Returns False (and keeps the current one) otherwise."""
        if language not in constants.SUPPORTED_LANGUAGES:
            logger.warning("Unsupported language '%s'; keeping '%s'", language, self.language)
            return False
        self.language = language
        return True


class SessionManager:
    """
    Manager for active sessions, keyed by auth token.

    Anonymous callers get a fresh session each time. The registry holds at
    most max_sessions entries; the least recently used one is dropped first,
    and sessions idle longer than idle_ttl_seconds are dropped on the next
    lookup. A session that signs out (for instance after a 401 from the API)
    leaves the registry, so the next request with that token starts fresh.
    """
    def __init__(
        self,
        max_sessions: Optional[int] = None,
        idle_ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_sessions = settings.MAX_SESSIONS if max_sessions is None else max_sessions
        self.idle_ttl_seconds = settings.SESSION_IDLE_TTL_SECONDS if idle_ttl_seconds is None else idle_ttl_seconds
        self._clock = clock
        # token -> (last used, session), least recently used first
        self._sessions: "OrderedDict[str, Tuple[float, GardenSession]]" = OrderedDict()
        self._lock = threading.Lock()

    def get_session(self, token: Optional[str], language: Optional[str] = None) -> GardenSession:
        """
        Return the session for a token, creating it on first use.
        The language, when given, is applied to the session.
        """
        if not token:
            return GardenSession(language=language)
        now = self._clock()
        with self._lock:
            self._drop_idle(now)
            entry = self._sessions.pop(token, None)
            if entry is None:
                session = GardenSession(token=token, language=language)
                session.on_sign_out = lambda: self._discard(token, session)
                logger.info("Started session (%d active)", len(self._sessions) + 1)
            else:
                session = entry[1]
            self._sessions[token] = (now, session)
            while len(self._sessions) > self.max_sessions:
                _, (_, evicted) = self._sessions.popitem(last=False)
                evicted.cache.clear()
                logger.info("Session limit %d reached; evicted least recently used session", self.max_sessions)
        if language and language != session.language:
            session.set_language(language)
        return session

    def _drop_idle(self, now: float) -> None:
        while self._sessions:
            token, (last_used, session) = next(iter(self._sessions.items()))
            if now - last_used <= self.idle_ttl_seconds:
                break
            del self._sessions[token]
            session.cache.clear()
            logger.debug("Dropped idle session")

    def _discard(self, token: str, session: GardenSession) -> None:
        with self._lock:
            entry = self._sessions.get(token)
            if entry is not None and entry[1] is session:
                del self._sessions[token]
                logger.info("Session signed out (%d active)", len(self._sessions))

    def end_session(self, token: str) -> None:
        """
        Drop the session for a token and clear its state.
        """
        with self._lock:
            entry = self._sessions.pop(token, None)
        if entry:
            entry[1].clear_token()
            logger.info("Ended session (%d active)", len(self._sessions))

    def end_all_sessions(self) -> None:
        """
        End all active sessions for graceful shutdown.
        """
        with self._lock:
            tokens = list(self._sessions.keys())
        for token in tokens:
            self.end_session(token)

    def __len__(self) -> int:
        return len(self._sessions)


# Global session manager instance
session_manager = SessionManager()
