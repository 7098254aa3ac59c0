"""
HrefPlayer

Main class for replaying editing events.

Owns one StateReconstructor and one PlaybackScheduler, applies every event
the scheduler delivers, and pushes the resulting snapshot to state listeners
and an optional viewer.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..config import PlayerOptions
from ..core.document import Document, document_from_dict, loads_document, read_document
from ..core.errors import LoadError, OperationError
from ..core.events import Event
from ..core.reconstructor import StateReconstructor
from ..core.state import TextState
from ..logging_config import get_logger
from ..render.viewer import TextViewer
from .clock import monotonic_ms
from .scheduler import PlaybackScheduler, PlaybackStatus

StateListener = Callable[[TextState], None]
EventListener = Callable[[Event, TextState], None]


@dataclass(frozen=True)
class PlayerState:
    status: PlaybackStatus
    is_playing: bool
    current_time: float
    duration: float
    speed: float
    text_state: TextState

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "isPlaying": self.is_playing,
            "currentTime": self.current_time,
            "duration": self.duration,
            "speed": self.speed,
            "textState": self.text_state.to_dict(),
        }


class HrefPlayer:
    """
    Caller-facing replay surface.

    Usage:
        player = HrefPlayer()
        player.load_json(raw)
        player.seek(1500)
        player.get_text_state().text
    """

    def __init__(
        self,
        options: Optional[PlayerOptions] = None,
        viewer: Optional[TextViewer] = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.options = options or PlayerOptions()
        self._document: Optional[Document] = None
        self._scheduler = PlaybackScheduler(speed=self.options.speed, clock=clock)
        self._reconstructor = StateReconstructor(self.options.reconstructor)
        self._viewer = viewer
        self._state_listeners: List[StateListener] = []
        self._event_listeners: List[EventListener] = []
        self._replaying = False
        self._logger = get_logger(__name__)

        self._scheduler.on_event(self._handle_event)
        self._scheduler.on_finish(self._handle_finish)

    @property
    def document(self) -> Optional[Document]:
        return self._document

    @property
    def scheduler(self) -> PlaybackScheduler:
        return self._scheduler

    # Listeners

    def on_state_change(self, callback: StateListener) -> StateListener:
        """Register a callback receiving each new TextState snapshot."""
        self._state_listeners.append(callback)
        return callback

    def on_event(self, callback: EventListener) -> EventListener:
        """Register a callback receiving every delivered event (custom ones included)."""
        self._event_listeners.append(callback)
        return callback

    def _handle_event(self, event: Event) -> None:
        state = self._reconstructor.apply_event(event)
        for callback in self._event_listeners:
            callback(event, state)
        if not self._replaying:
            self._publish(state)

    def _handle_finish(self) -> None:
        self._logger.info(f"Playback finished at {self._scheduler.get_duration()}ms")

    def _publish(self, state: TextState) -> None:
        if self._viewer is not None:
            self._viewer.render(state)
        for callback in self._state_listeners:
            callback(state)

    # Loading

    def load(self, document: Union[Document, Dict[str, Any]]) -> None:
        """
        Load an HREF document (or its raw dict form).

        Raises:
            LoadError: If the document is invalid; the previous one stays loaded
        """
        if isinstance(document, dict):
            document = document_from_dict(document)
        elif not isinstance(document, Document):
            raise LoadError(f"Expected an HREF document, got {type(document).__name__}")

        self._scheduler.load_events(document.events)
        self._document = document
        self._logger = get_logger(__name__, trace_id=document.session.id)
        self._publish(self._reconstructor.reset(document.initial_text))
        self._logger.info(
            f"Loaded document with {len(document.events)} events ({self._scheduler.get_duration()}ms)"
        )

        if self.options.auto_play:
            self.play()

    def load_json(self, json_text: Union[str, bytes]) -> None:
        """Parse then load. Raises LoadError on malformed JSON."""
        self.load(loads_document(json_text))

    def load_file(self, path: Union[str, Path]) -> None:
        self.load(read_document(path))

    # Playback

    def _require_document(self) -> Document:
        if self._document is None:
            raise OperationError("No document loaded")
        return self._document

    def play(self) -> None:
        """Start playback; restarts from the beginning once finished."""
        self._require_document()
        if self._scheduler.is_finished:
            self.stop()
        self._scheduler.play()
        self._logger.debug(f"Playing from {self._scheduler.current_time}ms")

    def pause(self) -> None:
        self._scheduler.pause()

    def stop(self) -> None:
        """Stop playback and reset text to the document's initial text."""
        self._scheduler.stop()
        if self._document is not None:
            self._publish(self._reconstructor.reset(self._document.initial_text))

    def seek(self, time_ms: float) -> float:
        """
        Seek to a specific time (in milliseconds).

        Text state is rebuilt by replaying from the start; listeners see one
        state change with the final snapshot. A rejected target leaves text and
        position as they were.
        """
        document = self._require_document()
        self._scheduler.check_seek(time_ms)
        self._reconstructor.reset(document.initial_text)
        self._replaying = True
        try:
            target = self._scheduler.seek(time_ms)
        finally:
            self._replaying = False
        self._publish(self._reconstructor.get_state())
        self._logger.debug(f"Seeked to {target}ms ({self._scheduler.delivered} events applied)")
        return target

    def set_speed(self, speed: float) -> None:
        self._scheduler.set_speed(speed)

    def tick(self, now: Optional[float] = None) -> int:
        """Advance playback; call from a timer or animation loop."""
        return self._scheduler.tick(now)

    def run(self, sleep: Callable[[float], None] = time.sleep) -> PlayerState:
        """
        Play to the end, ticking every options.tick_interval_ms.

        Blocks the calling thread. Returns the final player state.
        """
        if not self._scheduler.is_playing:
            self.play()
        interval = self.options.tick_interval_ms / 1000.0
        while self._scheduler.is_playing:
            self.tick()
            if self._scheduler.is_playing:
                sleep(interval)
        return self.get_state()

    # State

    def get_state(self) -> PlayerState:
        return PlayerState(
            status=self._scheduler.status,
            is_playing=self._scheduler.is_playing,
            current_time=self._scheduler.current_time,
            duration=self._scheduler.get_duration(),
            speed=self._scheduler.speed,
            text_state=self._reconstructor.get_state(),
        )

    def get_text_state(self) -> TextState:
        return self._reconstructor.get_state()

    # Viewer

    def attach_viewer(self, viewer: TextViewer) -> None:
        self._viewer = viewer
        viewer.render(self._reconstructor.get_state())

    def detach_viewer(self) -> None:
        if self._viewer is not None:
            self._viewer.clear()
            self._viewer = None
