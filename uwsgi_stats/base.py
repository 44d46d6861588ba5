"""Base collector ABC, metric sink and shared data types."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

FieldValue = int | float | str | bool


def _escape(value: str, specials: str) -> str:
    for ch in specials:
        value = value.replace(ch, "\\" + ch)
    return value


def _format_field(value: FieldValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value}i"
    if isinstance(value, float):
        return repr(value)
    return '"' + str(value).replace("\\", "\\\\").replace('"', '\\"') + '"'


@dataclass
class Measurement:
    name: str
    fields: dict[str, FieldValue]
    tags: dict[str, str] = field(default_factory=dict)
    timestamp: int | None = None  # nanoseconds since the epoch

    def to_line(self) -> str:
        """Render as an InfluxDB line protocol record."""
        head = _escape(self.name, ", ")
        for key in sorted(self.tags):
            value = self.tags[key]
            if value == "":
                continue
            head += f",{_escape(key, ',= ')}={_escape(value, ',= ')}"
        body = ",".join(
            f"{_escape(key, ',= ')}={_format_field(value)}"
            for key, value in self.fields.items()
        )
        line = f"{head} {body}"
        if self.timestamp is not None:
            line += f" {self.timestamp}"
        return line

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "fields": dict(self.fields),
            "tags": dict(self.tags),
            "timestamp": self.timestamp,
        }


class MetricSink(ABC):
    """Receiver of (measurement, fields, tags) triples."""

    @abstractmethod
    def add_fields(
        self,
        measurement: str,
        fields: dict[str, FieldValue],
        tags: dict[str, str],
    ) -> None:
        ...


class Accumulator(MetricSink):
    """Sink that keeps every measurement in arrival order."""

    def __init__(self) -> None:
        self.measurements: list[Measurement] = []

    def add_fields(
        self,
        measurement: str,
        fields: dict[str, FieldValue],
        tags: dict[str, str],
    ) -> None:
        self.measurements.append(
            Measurement(
                name=measurement,
                fields=dict(fields),
                tags=dict(tags),
                timestamp=time.time_ns(),
            )
        )

    def by_name(self, name: str) -> list[Measurement]:
        return [m for m in self.measurements if m.name == name]


@dataclass
class CollectorResult:
    name: str
    measurements: list[Measurement]
    errors: dict[str, str] = field(default_factory=dict)  # target -> message

    @property
    def reachable(self) -> bool:
        return not self.errors

    @property
    def error(self) -> str | None:
        if not self.errors:
            return None
        return "; ".join(self.errors.values())


class BaseCollector(ABC):
    """Abstract base for all metric collectors."""

    def __init__(self, name: str, poll_every: int = 10, url: str = "") -> None:
        self.name = name
        self.poll_every = poll_every
        self.url = url

    @abstractmethod
    async def collect(self) -> CollectorResult:
        """Fetch current metrics. Must not raise; return errors in the result."""
        ...
