"""Records handed to the sink: page additions and deletions."""
from __future__ import annotations

import base64
import time
import uuid as uuid_module
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

FIELD_REFERENCE = "reference"
FIELD_CONTENT = "content"
FIELD_EPOCH = "epochSecond"
FIELD_URL = "url"
FIELD_CONTEXT = "context"
FIELD_UUID = "uuid"
FIELD_STATUS = "status"
FIELD_CHILD = "childPages"
FIELD_EXTERNAL = "externalPages"
FIELD_COMMAND = "command"


class Command(str, Enum):
    ADD = "ADD"
    DELETE = "DELETE"


def reference_for(url: str) -> str:
    """Stable document reference of `url`, identical across runs."""
    return base64.b64encode(url.encode("utf-8")).decode("ascii")


def run_id_for(seed_url: str) -> str:
    """Identifier of the runs started from `seed_url`; safe to use as a file name."""
    return base64.urlsafe_b64encode(seed_url.encode("utf-8")).decode("ascii")


def encode_content(content: bytes) -> str:
    return base64.b64encode(content).decode("ascii")


@dataclass(frozen=True)
class CrawlRecord:
    url: str
    root_url: str
    content: bytes
    headers: Mapping[str, Sequence[str]] = field(default_factory=dict)
    child_pages: tuple[str, ...] = ()
    external_pages: tuple[str, ...] = ()
    status: int = 200
    epoch_second: int = field(default_factory=lambda: int(time.time()))
    uuid: str = field(default_factory=lambda: str(uuid_module.uuid4()))

    @property
    def reference(self) -> str:
        return reference_for(self.url)

    @property
    def command(self) -> Command:
        return Command.ADD

    def to_event(self) -> dict[str, Any]:
        event: dict[str, Any] = {
            FIELD_REFERENCE: self.reference,
            FIELD_CONTENT: encode_content(self.content),
            FIELD_EPOCH: self.epoch_second,
            FIELD_URL: self.url,
            FIELD_UUID: self.uuid,
            FIELD_STATUS: self.status,
            FIELD_CONTEXT: self.root_url,
            FIELD_COMMAND: self.command.value,
            FIELD_CHILD: list(self.child_pages),
            FIELD_EXTERNAL: list(self.external_pages),
        }
        # Response headers are copied verbatim next to the record fields.
        for name, values in self.headers.items():
            if name is not None:
                event[name] = list(values)
        return event


@dataclass(frozen=True)
class DeleteRecord:
    reference: str

    @classmethod
    def for_url(cls, url: str) -> "DeleteRecord":
        return cls(reference=reference_for(url))

    @property
    def command(self) -> Command:
        return Command.DELETE

    def to_event(self) -> dict[str, Any]:
        return {FIELD_REFERENCE: self.reference, FIELD_COMMAND: self.command.value}

