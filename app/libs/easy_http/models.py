from collections.abc import AsyncIterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

from pydantic_core import to_json


@dataclass(frozen=True)
class RawBody:
    data: bytes

    def content(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class TextBody:
    text: str

    def content(self) -> bytes:
        return self.text.encode("utf-8")


@dataclass(frozen=True)
class StreamBody:
    stream: BinaryIO | AsyncIterable[bytes]

    def content(self) -> bytes | AsyncIterable[bytes]:
        # sync readers are drained up front, the async transport cannot iterate them
        if hasattr(self.stream, "read"):
            return self.stream.read()
        return self.stream


@dataclass(frozen=True)
class JsonBody:
    value: Any

    def content(self) -> bytes:
        return to_json(self.value)


Body = RawBody | TextBody | StreamBody | JsonBody


def body_from_value(value: Any) -> Body:
    """Pick the body variant once, when the body is set."""
    if isinstance(value, RawBody | TextBody | StreamBody | JsonBody):
        return value
    if isinstance(value, bytes | bytearray | memoryview):
        return RawBody(bytes(value))
    if isinstance(value, str):
        return TextBody(value)
    if hasattr(value, "read") or hasattr(value, "__aiter__"):
        return StreamBody(value)
    return JsonBody(value)


@dataclass
class File:
    name: str
    param_name: str
    reader: BinaryIO | None = None
    path: str | None = None

    def read(self) -> bytes:
        if self.reader is not None:
            return self.reader.read()
        if self.path is None:
            raise ValueError(f"file {self.name!r} has neither a reader nor a path")
        return Path(self.path).read_bytes()


@dataclass(frozen=True)
class Cookie:
    name: str
    value: str
