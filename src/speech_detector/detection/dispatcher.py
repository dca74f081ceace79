"""Turn detector events into recording sink and audio pipeline commands."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from ..core.events import DetectorEvent, DetectorEventType, RecordedChunk
from ..core.runtime import RuntimeState

logger = logging.getLogger(__name__)


class RecordingSink(Protocol):
    """Captures raw audio between start and stop; yields chunks asynchronously."""

    def start(self, segment_id: int) -> None: ...

    def stop(self, segment_id: int) -> None: ...


class AudioPipeline(Protocol):
    """Upstream audio delivery that can be paused while the detector is stopped."""

    def resume(self) -> None: ...

    def suspend(self) -> None: ...


FaultHandler = Callable[[str, Exception], None]


class CommandDispatcher:
    """
    Maps segment lifecycle events to sink commands and decides which recorded
    chunks reach the host.

    Chunks are matched to segments by id: a chunk is dropped only if the
    segment it was recorded for was aborted.
    """

    def __init__(
        self,
        state: RuntimeState,
        sink: Optional[RecordingSink] = None,
        pipeline: Optional[AudioPipeline] = None,
        on_fault: Optional[FaultHandler] = None,
    ):
        self._state = state
        self._sink = sink
        self._pipeline = pipeline
        self._on_fault = on_fault

    def dispatch(self, event: DetectorEvent) -> None:
        if event.type is DetectorEventType.SEGMENT_START:
            self._command("start", self._sink and self._sink.start, event.segment_id)
            self.resume_pipeline()
        elif event.type is DetectorEventType.SEGMENT_END:
            self._state.suppress_next_chunk = False
            self._command("stop", self._sink and self._sink.stop, event.segment_id)
        elif event.type is DetectorEventType.SEGMENT_ABORT:
            self.discard_segment(event.segment_id)
            self._command("stop", self._sink and self._sink.stop, event.segment_id)

    def discard_segment(self, segment_id: Optional[int]) -> None:
        self._state.suppress_next_chunk = True
        if segment_id is not None and segment_id not in self._state.aborted_segment_ids:
            self._state.aborted_segment_ids.append(segment_id)

    def stop_recording(self, segment_id: int) -> None:
        self._command("stop", self._sink and self._sink.stop, segment_id)

    def resume_pipeline(self) -> None:
        self._command("resume", self._pipeline and self._pipeline.resume)

    def suspend_pipeline(self) -> None:
        self._command("suspend", self._pipeline and self._pipeline.suspend)

    def accept_chunk(self, chunk: RecordedChunk) -> bool:
        """Check-and-clear: return True if the chunk should be forwarded to the host."""
        state = self._state
        if chunk.segment_id is None:
            suppressed = state.suppress_next_chunk
        else:
            suppressed = chunk.segment_id in state.aborted_segment_ids
            if suppressed:
                state.aborted_segment_ids.remove(chunk.segment_id)
        state.suppress_next_chunk = False

        if suppressed:
            logger.debug("Dropping chunk of aborted segment %s (%d bytes)", chunk.segment_id, len(chunk.data))
        return not suppressed

    def _command(self, name: str, command: Optional[Callable[..., None]], *args) -> None:
        if command is None:
            return
        try:
            command(*args)
        except Exception as e:
            logger.error(f"Audio command '{name}' failed: {e}", exc_info=True)
            if self._on_fault:
                self._on_fault(name, e)
