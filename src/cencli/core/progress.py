"""Advisory progress notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

logger = logging.getLogger("cencli")


class Stage(str, Enum):
    """Conceptual phase of an operation emitting progress."""

    PREPARE = "prepare"
    FETCH = "fetch"
    PROCESS = "process"
    RENDER = "render"


@dataclass(slots=True, frozen=True)
class ProgressEvent:
    stage: Stage
    message: str
    error: BaseException | None = None


class ProgressSink(Protocol):
    def notify(self, stage: Stage, message: str) -> None: ...
    def notify_error(self, stage: Stage, error: BaseException) -> None: ...


class NullProgressSink:
    """Discards every notification."""

    def notify(self, stage: Stage, message: str) -> None:
        return None

    def notify_error(self, stage: Stage, error: BaseException) -> None:
        return None


class LoggingProgressSink:
    """Forwards notifications to the package logger."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target or logger

    def notify(self, stage: Stage, message: str) -> None:
        self._logger.info("progress stage=%s message=%s", stage.value, message)

    def notify_error(self, stage: Stage, error: BaseException) -> None:
        self._logger.warning("progress stage=%s error=%s", stage.value, error)


class RecordingProgressSink:
    """Keeps events in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[ProgressEvent] = []

    def notify(self, stage: Stage, message: str) -> None:
        self.events.append(ProgressEvent(stage=stage, message=message))

    def notify_error(self, stage: Stage, error: BaseException) -> None:
        self.events.append(ProgressEvent(stage=stage, message=str(error), error=error))

    @property
    def messages(self) -> list[str]:
        return [event.message for event in self.events if event.error is None]

    @property
    def errors(self) -> list[BaseException]:
        return [event.error for event in self.events if event.error is not None]


class SafeProgressSink:
    """Guards a sink so a failing listener never fails the run."""

    def __init__(self, delegate: ProgressSink | None) -> None:
        self._delegate = delegate or NullProgressSink()

    def notify(self, stage: Stage, message: str) -> None:
        try:
            self._delegate.notify(stage, message)
        except Exception as exc:
            logger.debug("progress sink failed stage=%s error=%s", stage.value, exc.__class__.__name__)

    def notify_error(self, stage: Stage, error: BaseException) -> None:
        try:
            self._delegate.notify_error(stage, error)
        except Exception as exc:
            logger.debug("progress sink failed stage=%s error=%s", stage.value, exc.__class__.__name__)


__all__ = [
    "Stage",
    "ProgressEvent",
    "ProgressSink",
    "NullProgressSink",
    "LoggingProgressSink",
    "RecordingProgressSink",
    "SafeProgressSink",
]
