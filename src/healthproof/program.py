"""Guest program handles and their content-derived image ids."""

from __future__ import annotations

import hashlib
import inspect
from dataclasses import dataclass
from types import ModuleType
from typing import Callable, Sequence, Tuple

from . import calculator, codec, guest, journal
from .codec import bytes_to_words, to_hex, words_to_bytes
from .errors import SerializationError

IMAGE_ID_WORDS = 8
IMAGE_ID_DOMAIN = b"healthproof.image-id.v1"


@dataclass(frozen=True, slots=True)
class ImageId:
    words: Tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.words) != IMAGE_ID_WORDS:
            raise SerializationError(f"Image id needs {IMAGE_ID_WORDS} words, got {len(self.words)}")
        # Range-checks every word.
        words_to_bytes(self.words)

    def to_bytes(self) -> bytes:
        return words_to_bytes(self.words)

    def hex(self, *, prefixed: bool = False) -> str:
        return to_hex(self.to_bytes(), prefixed=prefixed)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ImageId":
        if len(data) != IMAGE_ID_WORDS * codec.WORD_BYTES:
            raise SerializationError(f"Image id must be {IMAGE_ID_WORDS * codec.WORD_BYTES} bytes, got {len(data)}")
        return cls(tuple(bytes_to_words(data)))

    @classmethod
    def from_digest(cls, digest: bytes) -> "ImageId":
        return cls.from_bytes(digest[: IMAGE_ID_WORDS * codec.WORD_BYTES])


def compute_image_id(name: str, modules: Sequence[ModuleType]) -> ImageId:
    hasher = hashlib.sha256(IMAGE_ID_DOMAIN)
    hasher.update(name.encode("utf-8"))
    for module in modules:
        source = inspect.getsource(module).replace("\r\n", "\n")
        hasher.update(module.__name__.encode("utf-8"))
        hasher.update(len(source).to_bytes(8, "big"))
        hasher.update(source.encode("utf-8"))
    return ImageId.from_digest(hasher.digest())


@dataclass(frozen=True)
class GuestProgram:
    """A guest entry point plus every module whose code it executes."""

    name: str
    entry: Callable[[guest.GuestEnv], None]
    modules: Tuple[ModuleType, ...]
    image_id: ImageId

    @classmethod
    def build(cls, name: str, entry: Callable[[guest.GuestEnv], None], modules: Sequence[ModuleType]) -> "GuestProgram":
        return cls(name=name, entry=entry, modules=tuple(modules), image_id=compute_image_id(name, modules))


HEALTH_FACTOR_PROGRAM = GuestProgram.build(
    "health-factor",
    guest.health_factor_main,
    (codec, calculator, journal, guest),
)
