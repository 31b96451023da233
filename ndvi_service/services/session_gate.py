import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from ndvi_service.exceptions import AuthError
from ndvi_service.utils.single_flight import SingleFlight

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle of the Earth Engine session for this process."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class SessionGate:
    """
    Gate every Earth Engine query behind one successful handshake.

    The handshake is an async callable supplied by the caller (the Earth
    Engine authenticator in production, a fake in tests). Concurrent callers
    of ``ensure_ready`` while the handshake is running all wait on that single
    attempt. A failed attempt sends the gate back to UNINITIALIZED so the next
    request retries; once READY the gate never leaves that state.
    """

    def __init__(self, handshake: Callable[[], Awaitable[None]]):
        self._handshake = handshake
        self._state = SessionState.UNINITIALIZED
        self._last_error: Optional[BaseException] = None
        self._flight: SingleFlight[None] = SingleFlight("earth-engine-handshake")

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._last_error

    async def ensure_ready(self) -> None:
        """Return once the session is READY; raise AuthError if the handshake fails."""
        if self._state is SessionState.READY:
            logger.debug("Earth Engine already initialized, skipping.")
            return

        await self._flight.do(self._initialize)

    async def _initialize(self) -> None:
        self._state = SessionState.INITIALIZING
        logger.info("Initializing Earth Engine...")

        try:
            await self._handshake()
        except AuthError as e:
            self._fail(e)
            raise
        except Exception as e:
            self._fail(e)
            raise AuthError(f"Earth Engine handshake failed: {e}") from e

        self._state = SessionState.READY
        self._last_error = None
        logger.info("Earth Engine initialized successfully")

    def _fail(self, error: BaseException) -> None:
        self._state = SessionState.FAILED
        self._last_error = error
        logger.error(f"Earth Engine initialization error: {error}")
        # Allow a later request to retry the handshake
        self._state = SessionState.UNINITIALIZED
