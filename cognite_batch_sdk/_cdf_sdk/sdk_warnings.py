from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from rich import print
from rich.console import Console


class SeverityLevel(Enum):
    HIGH = "red"
    MEDIUM = "yellow"

    @property
    def prefix(self) -> str:
        return f"[bold {self.value}]WARNING [{self.name}]:[/]"


@dataclass(frozen=True)
class SDKWarning(ABC, UserWarning):
    severity: ClassVar[SeverityLevel]

    @abstractmethod
    def get_message(self) -> str:
        raise NotImplementedError()

    def __str__(self) -> str:
        return self.get_message()

    def print_warning(self, console: Console | None = None) -> None:
        if console is None:
            print(self.severity.prefix, self.get_message())
        else:
            console.print(self.severity.prefix, self.get_message())


@dataclass(frozen=True)
class HighSeverityWarning(SDKWarning):
    severity: ClassVar[SeverityLevel] = SeverityLevel.HIGH
    message_raw: str

    def get_message(self) -> str:
        return self.message_raw


@dataclass(frozen=True)
class MediumSeverityWarning(SDKWarning):
    severity: ClassVar[SeverityLevel] = SeverityLevel.MEDIUM
    message_raw: str

    def get_message(self) -> str:
        return self.message_raw
