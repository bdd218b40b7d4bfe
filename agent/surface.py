"""Narrow capabilities the solver needs from a browser and an ASR backend."""

from typing import Optional, Protocol


class Element(Protocol):
    async def click(self) -> None: ...

    async def fill(self, value: str) -> None: ...

    async def text(self) -> str:
        """Visible text, or "" when it cannot be read."""
        ...

    async def attribute(self, name: str) -> Optional[str]: ...

    async def html(self) -> str: ...


class BrowsingSurface(Protocol):
    async def find(
        self,
        selector: str,
        frame: Optional[str] = None,
        timeout_ms: int = 0,
        visible: bool = True,
    ) -> Optional[Element]:
        """
        Return the first element matching selector, waiting at most timeout_ms.
        frame is a selector for the iframe to search in. With visible=False an
        element attached to the DOM is enough.
        Absence is None, never an exception.
        """
        ...

    async def fetch(self, url: str) -> bytes: ...

    async def wait(self, ms: int) -> None: ...


class AudioTranscriber(Protocol):
    async def resolve(self, data: bytes) -> str: ...
