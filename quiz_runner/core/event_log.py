"""Answer events and the append-only log a session records them in."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _EventModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class SelectAnswers(_EventModel):
    event: Literal["selectAnswers"] = "selectAnswers"
    question_id: int
    answer_ids: tuple[int, ...]


class InputAnswers(_EventModel):
    event: Literal["inputAnswers"] = "inputAnswers"
    question_id: int
    inputs: tuple[str, ...]


class ClearAnswers(_EventModel):
    event: Literal["clearAnswers"] = "clearAnswers"
    question_id: int


Event = Annotated[Union[SelectAnswers, InputAnswers, ClearAnswers], Field(discriminator="event")]


class EventLogDocument(_EventModel):
    """Serializable form of an event log, tagged with the quiz it belongs to."""

    uid: str
    version: int
    events: tuple[Event, ...] = ()


class EventLog:
    """Ordered record of accepted events.

    The generation is the number of recorded events. It only ever grows, by
    exactly one per accepted event, and is used both for replay and for view
    cache invalidation.
    """

    def __init__(self, uid: str, version: int) -> None:
        self._uid = uid
        self._version = version
        self._events: list[Event] = []

    @property
    def uid(self) -> str:
        return self._uid

    @property
    def version(self) -> int:
        return self._version

    @property
    def generation(self) -> int:
        return len(self._events)

    def push(self, event: Event) -> None:
        self._events.append(event)

    def get_events(self) -> list[Event]:
        """Return a copy of the recorded events in application order."""
        return list(self._events)

    def to_document(self) -> EventLogDocument:
        return EventLogDocument(uid=self._uid, version=self._version, events=tuple(self._events))
