"""Sources of raw bank notification messages."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from smsledger.domain.entities import RawMessage
from smsledger.domain.errors import NotFoundError, PermissionDeniedError, ValidationError


class MessageSource(ABC):
    """A one-shot bulk pull of inbox messages."""

    @abstractmethod
    def list(self) -> list[RawMessage]:
        """Return every message currently in the inbox.

        Raises:
            PermissionDeniedError: If access to the messages was refused
        """
        pass


def message_from_record(record: dict[str, Any]) -> RawMessage:
    """Build a RawMessage from an inbox export entry.

    Android exports use ``_id`` and ``date`` (epoch milliseconds); ``id`` and
    ``timestamp`` are accepted as well.
    """
    message_id = record.get("_id", record.get("id"))
    if message_id is None:
        raise ValueError("message has no id")
    timestamp = record.get("date", record.get("timestamp", ""))
    return RawMessage(
        id=str(message_id),
        address=str(record.get("address", "")),
        body=str(record.get("body", "")),
        timestamp=str(timestamp),
    )


class JsonFileMessageSource(MessageSource):
    """Reads an inbox export: a JSON array of message objects."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def list(self) -> list[RawMessage]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFoundError(f"Message file not found: {self.path}")
        except PermissionError as e:
            raise PermissionDeniedError(f"Permission denied reading messages: {e}")

        try:
            records = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Message file is not valid JSON: {e}")
        if not isinstance(records, list):
            raise ValidationError("Message file must contain a JSON array")

        messages = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise ValidationError(f"Message {index}: expected an object")
            try:
                messages.append(message_from_record(record))
            except ValueError as e:
                raise ValidationError(f"Message {index}: {e}")
        return messages
