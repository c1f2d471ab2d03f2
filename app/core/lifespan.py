"""Lifespan management: startup/shutdown events that fill a shared application state."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine
from typing import Any

from robyn import Robyn

from app.core.logger import LogIcon, logger
from app.core.settings import Settings
from app.core.settings import settings as st

AsyncHandler = Callable[[], Coroutine[Any, Any, None]]


class State:
    """Application state container with attribute access, populated by lifespan events."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        object.__setattr__(self, "_data", {})

    def __getattr__(self, name: str) -> Any:
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"State has no attribute '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        self._data[name] = value

    def __contains__(self, name: str) -> bool:
        return name in self._data

    def __repr__(self) -> str:
        return f"State({sorted(self._data)})"

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def clear(self) -> None:
        self._data.clear()


class BaseEvent[T](ABC):
    """A resource created at startup and stored on the state under ``name``."""

    name: str

    def __init__(self, config: Settings) -> None:
        self.config = config

    @abstractmethod
    async def startup(self) -> T: ...

    async def shutdown(self, instance: T) -> None:  # noqa: B027
        """Optional cleanup. Override if cleanup is needed."""

    @classmethod
    def has_shutdown(cls) -> bool:
        return cls.shutdown is not BaseEvent.shutdown


class Lifespan:
    """Runs registered events on startup and tears them down in reverse order."""

    def __init__(self, app: Robyn, config: Settings = st) -> None:
        self._app = app
        self._config = config
        self._event_classes: list[type[BaseEvent[Any]]] = []
        self._events: list[BaseEvent[Any]] = []
        self.state = State()

    def register(self, event_cls: type[BaseEvent[Any]]) -> "Lifespan":
        """Register an event class. Returns self for chaining."""
        self._event_classes.append(event_cls)
        return self

    @property
    def events(self) -> list[BaseEvent[Any]]:
        return self._events

    async def _startup(self) -> None:
        logger.info("Starting application lifespan", icon=LogIcon.START, version=self._config.API_VERSION)

        for event_cls in self._event_classes:
            event = event_cls(self._config)
            instance = await event.startup()
            setattr(self.state, event.name, instance)
            self._events.append(event)
            logger.info("Event ready", icon=LogIcon.SUCCESS, event_name=event.name)

        self._app.inject_global(state=self.state)

    async def _shutdown(self) -> None:
        if not self._events:
            logger.info("No events to shut down", icon=LogIcon.WARNING)
            return

        for event in reversed(self._events):
            if event.has_shutdown() and event.name in self.state:
                await event.shutdown(getattr(self.state, event.name))
                logger.info("Shutdown complete", icon=LogIcon.SUCCESS, event_name=event.name)

        self._events.clear()
        self.state.clear()
        logger.info("Cleanup complete", icon=LogIcon.COMPLETE)

    @property
    def startup(self) -> AsyncHandler:
        return self._startup

    @property
    def shutdown(self) -> AsyncHandler:
        return self._shutdown
