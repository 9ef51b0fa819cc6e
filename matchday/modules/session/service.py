"""
Session bootstrap controller.

Observes the identity provider and drives the bootstrap phase:

    initializing --identity + profile--> authenticated / needs_role_selection
    initializing --identity, no profile--> unauthenticated (ghost user signed out)
    initializing --identity, fetch error--> authenticated as spectator
    initializing --null identity / channel fault / timeout--> unauthenticated
    initializing --subscribe raised--> failed

Every input is posted to an inbox and handled by one consumer task, one
message at a time, so store writes never interleave with each other.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from matchday.shared.config import get_settings
from matchday.modules.profiles.interfaces import IProfileResolver
from matchday.modules.roles.models import BootstrapPhase, Session
from matchday.modules.roles.store import RoleStore

from .exceptions import SessionAlreadyStartedError
from .interfaces import Cancellable, IIdentityProvider, Scheduler
from .models import (
    BootstrapStarted,
    BootstrapTimedOut,
    ChannelFault,
    IdentityChanged,
    SessionMessage,
    SetupFailed,
)

logger = logging.getLogger(__name__)

PhaseCallback = Callable[[BootstrapPhase, Session], Union[None, Awaitable[None]]]

# Tells the consumer to exit once everything before it is handled
_STOP = object()


class _Cycle:
    """
    State owned by one bootstrap cycle.

    Each start() gets its own inbox, timer, first-notification flag and
    phase callback, so a consumer left over from an earlier cycle can never
    reach into a later one.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, on_phase_change: Optional[PhaseCallback]):
        self.loop = loop
        self.queue: asyncio.Queue = asyncio.Queue()
        self.closed = False
        self.timer: Optional[Cancellable] = None
        self.awaiting_first_notification = True
        self.on_phase_change = on_phase_change

    def post(self, message: Any) -> None:
        if self.closed:
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self.loop:
            self.queue.put_nowait(message)
        else:
            # Provider callbacks may arrive from a client thread
            self.loop.call_soon_threadsafe(self.queue.put_nowait, message)

    def close(self) -> None:
        self.closed = True

    def disarm(self) -> None:
        self.awaiting_first_notification = False
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None

    def discard_pending(self) -> None:
        while True:
            try:
                self.queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            self.queue.task_done()


class SessionHandle:
    """
    Cancellation handle returned by SessionController.start().

    cancel() disarms the bootstrap timer, unsubscribes from the identity
    provider and stops the consumer. It is safe to call more than once.
    """

    def __init__(
        self,
        controller: "SessionController",
        cycle: _Cycle,
        consumer: "asyncio.Task[None]",
    ):
        self._controller = controller
        self._cycle = cycle
        self._consumer = consumer
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._cycle.close()
        self._cycle.disarm()
        if self._unsubscribe is not None:
            try:
                self._unsubscribe()
            except Exception:
                logger.exception("Identity provider unsubscribe failed")
            self._unsubscribe = None
        self._consumer.cancel()
        self._cycle.discard_pending()
        self._controller._release(self)

    def _retire(self) -> None:
        """Deactivate without cancelling the consumer, letting queued messages finish."""
        self._active = False
        self._cycle.disarm()
        self._cycle.post(_STOP)
        self._cycle.close()
        self._controller._release(self)


class SessionController:
    """
    Bootstrap state machine between the identity provider and the RoleStore.

    Dependencies are injected; the controller holds no global state. Only one
    observation may be active at a time: cancel the previous handle before
    calling start() again. Messages left over from a superseded cycle are
    dropped unhandled.
    """

    def __init__(
        self,
        identity_provider: IIdentityProvider,
        profile_resolver: IProfileResolver,
        role_store: RoleStore,
        timeout_ms: Optional[int] = None,
        scheduler: Optional[Scheduler] = None,
        fallback_role: Optional[str] = None,
    ):
        settings = get_settings()
        self._provider = identity_provider
        self._resolver = profile_resolver
        self._store = role_store
        self._timeout_ms = timeout_ms if timeout_ms is not None else settings.bootstrap_timeout_ms
        self._scheduler = scheduler
        self._fallback_role = fallback_role or settings.default_role

        self._handle: Optional[SessionHandle] = None
        self._cycle: Optional[_Cycle] = None

        self._handlers: dict[type, Callable[[_Cycle, Any], Awaitable[None]]] = {
            BootstrapStarted: self._on_started,
            IdentityChanged: self._on_identity_changed,
            ChannelFault: self._on_channel_fault,
            BootstrapTimedOut: self._on_timeout,
            SetupFailed: self._on_setup_failed,
        }

    @property
    def store(self) -> RoleStore:
        return self._store

    @property
    def active(self) -> bool:
        return self._handle is not None and self._handle.active

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self, on_phase_change: Optional[PhaseCallback] = None) -> SessionHandle:
        """
        Begin observing identity changes.

        Must be called from inside a running event loop.

        Args:
            on_phase_change: Called with (phase, session) after every phase
                transition; may be a coroutine function

        Returns:
            Handle whose cancel() ends the observation

        Raises:
            SessionAlreadyStartedError: If a previous handle is still active
        """
        if self.active:
            raise SessionAlreadyStartedError()

        loop = asyncio.get_running_loop()
        cycle = _Cycle(loop, on_phase_change)
        self._cycle = cycle

        cycle.post(BootstrapStarted())
        cycle.timer = self._schedule(self._timeout_ms / 1000, lambda: cycle.post(BootstrapTimedOut()))
        consumer = loop.create_task(self._consume(cycle))
        handle = SessionHandle(self, cycle, consumer)
        self._handle = handle

        try:
            handle._unsubscribe = self._provider.subscribe(
                lambda identity: cycle.post(IdentityChanged(identity)),
                lambda error: cycle.post(ChannelFault(error)),
            )
        except Exception as e:
            logger.exception("Could not subscribe to identity changes")
            cycle.post(SetupFailed(e))
            handle._retire()

        return handle

    async def drain(self) -> None:
        """Wait until every message posted to the current cycle has been handled."""
        if self._cycle is not None:
            await self._cycle.queue.join()

    def _release(self, handle: SessionHandle) -> None:
        if self._handle is handle:
            self._handle = None

    def _schedule(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        if self._scheduler is not None:
            return self._scheduler(delay, callback)
        return asyncio.get_running_loop().call_later(delay, callback)

    async def _consume(self, cycle: _Cycle) -> None:
        while True:
            message = await cycle.queue.get()
            try:
                if message is _STOP:
                    return
                if cycle is not self._cycle:
                    logger.debug(f"Dropping {type(message).__name__} from a superseded bootstrap cycle")
                    continue
                await self._dispatch(cycle, message)
            except Exception:
                logger.exception(f"Session transition failed for {type(message).__name__}")
                self._store.clear()
                await self._transition(cycle, BootstrapPhase.UNAUTHENTICATED)
            finally:
                cycle.queue.task_done()

    async def _dispatch(self, cycle: _Cycle, message: SessionMessage) -> None:
        handler = self._handlers[type(message)]
        await handler(cycle, message)

    # -------------------------------------------------------------------------
    # Role selection
    # -------------------------------------------------------------------------

    def evaluate_phase(self) -> BootstrapPhase:
        """Phase implied by the current session contents."""
        session = self._store.snapshot()
        if not session.is_signed_in:
            return BootstrapPhase.UNAUTHENTICATED
        if session.awaiting_role_choice:
            return BootstrapPhase.NEEDS_ROLE_SELECTION
        return BootstrapPhase.AUTHENTICATED

    async def select_role(self, role: str) -> bool:
        """
        Apply the user's role choice and re-evaluate the phase.

        Returns:
            False if the role is not granted; nothing changes in that case.
        """
        if not self._store.select_role(role):
            return False

        if self._store.phase in (
            BootstrapPhase.NEEDS_ROLE_SELECTION,
            BootstrapPhase.AUTHENTICATED,
        ):
            phase = self.evaluate_phase()
            if phase != self._store.phase:
                await self._transition(self._cycle, phase)
        return True

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def _on_started(self, cycle: _Cycle, message: BootstrapStarted) -> None:
        await self._transition(cycle, BootstrapPhase.INITIALIZING)

    async def _on_identity_changed(self, cycle: _Cycle, message: IdentityChanged) -> None:
        cycle.disarm()
        identity = message.identity

        if identity is None:
            logger.debug("Identity cleared upstream")
            await self._signed_out(cycle, BootstrapPhase.UNAUTHENTICATED)
            return

        result = await self._resolver.resolve(identity.id)

        if result.is_not_found:
            logger.warning(f"No profile for identity {identity.id}; signing out orphaned account")
            await self._sign_out_quietly()
            await self._signed_out(cycle, BootstrapPhase.UNAUTHENTICATED)
            return

        self._store.set_identity(identity)
        if result.is_found:
            self._store.set_profile(result.profile)
        else:
            logger.warning(
                f"Profile fetch failed for {identity.id} ({result.reason}); "
                f"continuing as {self._fallback_role}"
            )
            self._store.set_profile(None)
            self._store.set_roles([self._fallback_role])

        await self._transition(cycle, self.evaluate_phase())

    async def _on_channel_fault(self, cycle: _Cycle, message: ChannelFault) -> None:
        cycle.disarm()
        logger.error(f"Identity channel fault: {message.error}")
        await self._signed_out(cycle, BootstrapPhase.UNAUTHENTICATED)

    async def _on_timeout(self, cycle: _Cycle, message: BootstrapTimedOut) -> None:
        if not cycle.awaiting_first_notification:
            return
        cycle.awaiting_first_notification = False
        logger.warning(
            f"No identity notification within {self._timeout_ms} ms; "
            "treating session as unauthenticated"
        )
        await self._signed_out(cycle, BootstrapPhase.UNAUTHENTICATED)

    async def _on_setup_failed(self, cycle: _Cycle, message: SetupFailed) -> None:
        cycle.disarm()
        await self._signed_out(cycle, BootstrapPhase.FAILED)

    async def _sign_out_quietly(self) -> None:
        try:
            await self._provider.sign_out()
        except Exception:
            logger.exception("Sign-out failed during orphaned account recovery")

    async def _signed_out(self, cycle: _Cycle, phase: BootstrapPhase) -> None:
        self._store.clear()
        await self._transition(cycle, phase)

    async def _transition(self, cycle: Optional[_Cycle], phase: BootstrapPhase) -> None:
        previous = self._store.phase
        self._store.set_phase(phase)
        if previous != phase:
            logger.info(f"Session phase {previous.value} -> {phase.value}")

        callback = cycle.on_phase_change if cycle is not None else None
        if callback is None:
            return
        try:
            result = callback(phase, self._store.snapshot())
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Phase change callback failed")


def build_session_controller(
    role_store: Optional[RoleStore] = None,
    **kwargs: Any,
) -> SessionController:
    """Wire a controller against the shared Supabase client."""
    from matchday.shared.database import get_supabase_client
    from matchday.modules.profiles.service import get_profile_resolver
    from .provider import SupabaseIdentityProvider

    settings = get_settings()
    return SessionController(
        identity_provider=SupabaseIdentityProvider(get_supabase_client()),
        profile_resolver=get_profile_resolver(),
        role_store=role_store or RoleStore(default_role=settings.default_role),
        **kwargs,
    )
