"""
Application Contexts

Who is signed in and which theme is active are held in explicit objects
that are created at startup, passed to whoever needs them, and stopped at
shutdown. Nothing here is module-level state.

Authentication itself happens elsewhere; this module only reacts to the
sessions it is handed.
"""

from typing import Awaitable, Callable, Optional

import structlog
from pydantic import BaseModel, ConfigDict

from cazen.audit import ActivityLogger
from cazen.config import AppSettings
from cazen.models.activity import ActivityEventBuilder
from cazen.models.planning import Theme
from cazen.services.storage import ProfileStorageInterface

logger = structlog.get_logger(__name__)


class AuthSession(BaseModel):
    """A signed-in user, as reported by the auth provider."""
    model_config = ConfigDict(frozen=True)

    user_id: str
    email: Optional[str] = None


SessionListener = Callable[[Optional[AuthSession]], Awaitable[None]]


class SessionContext:
    """
    Current auth session plus change notifications.

    Listeners are awaited in subscription order on every change.
    """

    def __init__(self):
        self._session: Optional[AuthSession] = None
        self._listeners: list[SessionListener] = []
        self._started = False

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def user_id(self) -> Optional[str]:
        return self._session.user_id if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def started(self) -> bool:
        return self._started

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener for session changes.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self, initial: Optional[AuthSession] = None) -> None:
        self._started = True
        await self.update(initial)

    async def update(self, session: Optional[AuthSession]) -> None:
        """Set the current session (None when signed out) and notify listeners."""
        if not self._started:
            raise RuntimeError("SessionContext is not started")
        self._session = session
        for listener in list(self._listeners):
            await listener(session)

    async def sign_out(self) -> None:
        await self.update(None)

    def stop(self) -> None:
        self._listeners.clear()
        self._session = None
        self._started = False


class ThemeContext:
    """
    Active colour theme.

    Signed-in users get the theme saved on their profile. Otherwise the
    last theme applied on this device is used.
    """

    def __init__(
        self,
        session: SessionContext,
        profiles: Optional[ProfileStorageInterface] = None,
        default: Theme = Theme.LIGHT,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._session = session
        self._profiles = profiles
        self._theme = default
        self._local_theme: Optional[Theme] = None
        self._activity_logger = activity_logger
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def local_theme(self) -> Optional[Theme]:
        """The theme remembered on this device, if any."""
        return self._local_theme

    def _apply(self, theme: Theme) -> None:
        self._theme = theme
        self._local_theme = theme

    async def _on_session_change(self, session: Optional[AuthSession]) -> None:
        if session is not None:
            await self._load_user_theme(session.user_id)
        elif self._local_theme is not None:
            self._apply(self._local_theme)

    async def _load_user_theme(self, user_id: str) -> None:
        if self._profiles is None:
            return
        preference = await self._profiles.get_theme_preference(user_id)
        if preference is not None:
            self._apply(preference)

    async def start(self) -> None:
        """Subscribe to session changes and load the current preference."""
        if self._unsubscribe is None:
            self._unsubscribe = self._session.subscribe(self._on_session_change)
        await self._on_session_change(self._session.session)

    async def set_theme(self, theme: Theme) -> None:
        """Apply a theme, saving it to the profile when signed in."""
        self._apply(theme)

        user_id = self._session.user_id
        if user_id is not None and self._profiles is not None:
            await self._profiles.set_theme_preference(user_id, theme)

        if self._activity_logger:
            await self._activity_logger.log(
                ActivityEventBuilder.theme_changed(user_id, theme)
            )

    async def toggle(self) -> Theme:
        await self.set_theme(Theme.DARK if self._theme == Theme.LIGHT else Theme.LIGHT)
        return self._theme

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


class AppContext:
    """Everything with an app-wide lifecycle, started and stopped together."""

    def __init__(
        self,
        settings: AppSettings,
        profiles: Optional[ProfileStorageInterface] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self.settings = settings
        self.session = SessionContext()
        self.theme = ThemeContext(
            self.session,
            profiles=profiles,
            default=settings.default_theme,
            activity_logger=activity_logger,
        )

    async def start(self, session: Optional[AuthSession] = None) -> None:
        # Theme subscribes first so it sees the initial session.
        await self.theme.start()
        await self.session.start(session)
        logger.info(
            "app_context_started",
            environment=self.settings.app_environment,
            authenticated=self.session.is_authenticated,
        )

    def stop(self) -> None:
        self.theme.stop()
        self.session.stop()
        logger.info("app_context_stopped")
