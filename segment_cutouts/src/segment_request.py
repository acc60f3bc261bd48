"""Tagged representation of the --show / --save flag values."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

SAVE_ALL = 'all'


class RequestKind(Enum):
    ABSENT = 'absent'   # flag not given
    FLAG = 'flag'       # flag given without a value
    NAMED = 'named'     # flag given with a value


@dataclass(frozen=True)
class SegmentRequest:
    kind: RequestKind
    name: Optional[str] = None

    @classmethod
    def absent(cls) -> 'SegmentRequest':
        return cls(RequestKind.ABSENT)

    @classmethod
    def flag(cls) -> 'SegmentRequest':
        return cls(RequestKind.FLAG)

    @classmethod
    def named(cls, name: str) -> 'SegmentRequest':
        return cls(RequestKind.NAMED, name)

    @classmethod
    def from_cli_value(cls, value: Union[None, bool, str]) -> 'SegmentRequest':
        """argparse gives None (absent), True (bare flag, via const) or a string."""
        if value is None or value is False:
            return cls.absent()
        if value is True:
            return cls.flag()
        return cls.named(str(value))

    @property
    def is_absent(self) -> bool:
        return self.kind is RequestKind.ABSENT

    @property
    def is_all(self) -> bool:
        return self.kind is RequestKind.NAMED and self.name == SAVE_ALL

    def target_in(self, segments: Sequence[str]) -> Optional[str]:
        """Return the named segment if it is one of segments, else None."""
        if self.kind is RequestKind.NAMED and self.name in segments:
            return self.name
        return None
