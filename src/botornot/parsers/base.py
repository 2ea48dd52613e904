"""Base parser class."""

from abc import ABC, abstractmethod
from typing import ClassVar

from botornot.config import ParserConfig
from botornot.models import ContainerType, ParseResult


class BaseParser(ABC):
    """Abstract base class for container parsers.

    Each parser walks one family of container formats and records every
    text-bearing field it recovers on the ``ParseResult``. Parsers raise
    ``MalformedContainer`` when the structure stops making sense; fields
    recorded before that point are kept by the dispatcher.

    Attributes:
        name: Human-readable name of the parser
        container_types: Container types this parser handles
    """

    name: ClassVar[str] = "base"
    container_types: ClassVar[tuple[ContainerType, ...]] = ()

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config = config or ParserConfig()

    @classmethod
    def handles(cls, container_type: ContainerType) -> bool:
        """Check if this parser handles the given container type."""
        return container_type in cls.container_types

    @abstractmethod
    def parse(self, data: bytes, result: ParseResult) -> None:
        """Walk the container and populate ``result`` (modified in place).

        Args:
            data: Complete media bytes
            result: ParseResult to populate
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
