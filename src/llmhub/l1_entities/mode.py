"""L1 entity: conversation mode."""

from __future__ import annotations

import enum


class Mode(enum.Enum):
    """Behavioral preset applied to the system instruction. At most one is active."""

    KID = 'kid'
    EXPERT = 'expert'
    INSHORT = 'inshort'
    NONE = 'none'

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Mode.KID: 'Kid-Friendly',
    Mode.EXPERT: 'Expert',
    Mode.INSHORT: 'Concise',
    Mode.NONE: '',
}
