from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import final

__all__ = ["Cord"]


@final
class Cord:
    """Immutable rope of byte chunks.

    Large payloads travel as a sequence of chunks. Operations never join the
    chunks unless ``bytes(cord)`` is requested explicitly.
    """

    __slots__ = ("_chunks", "_size")

    def __init__(self, chunks: Iterable[bytes] = ()) -> None:
        self._chunks: tuple[bytes, ...] = tuple(bytes(c) for c in chunks if c)
        self._size = sum(len(c) for c in self._chunks)

    @classmethod
    def from_bytes(cls, data: bytes) -> Cord:
        return cls((data,))

    @classmethod
    def join(cls, cords: Iterable[Cord]) -> Cord:
        """Concatenate cords by chaining their chunks."""
        return cls(chunk for cord in cords for chunk in cord)

    @property
    def chunks(self) -> tuple[bytes, ...]:
        return self._chunks

    def split(self, offset: int) -> tuple[Cord, Cord]:
        """Split into ``(self[:offset], self[offset:])``.

        Only the chunk straddling ``offset`` is sliced; every other chunk is
        shared with the result.
        """
        if not 0 <= offset <= self._size:
            msg = f"Split offset {offset} outside cord of size {self._size}"
            raise IndexError(msg)

        head: list[bytes] = []
        tail: list[bytes] = []
        seen = 0
        for chunk in self._chunks:
            end = seen + len(chunk)
            if end <= offset:
                head.append(chunk)
            elif seen >= offset:
                tail.append(chunk)
            else:
                cut = offset - seen
                head.append(chunk[:cut])
                tail.append(chunk[cut:])
            seen = end
        return Cord(head), Cord(tail)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._chunks)

    def __bytes__(self) -> bytes:
        return b"".join(self._chunks)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Cord):
            return len(self) == len(other) and bytes(self) == bytes(other)
        if isinstance(other, (bytes, bytearray, memoryview)):
            return len(self) == len(other) and bytes(self) == bytes(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(bytes(self))

    def __repr__(self) -> str:
        return f"Cord(chunks={len(self._chunks)}, size={self._size})"
