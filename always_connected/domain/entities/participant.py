"""Closed set of identities allowed to use the notifier."""

from __future__ import annotations

from enum import Enum


class Participant(str, Enum):
    """One of the two people sharing the notifier.

    The set is intentionally closed: adding a third identity means adding a
    member here and a row to ``_COUNTERPARTS``.
    """

    SHIVAM = "Shivam"
    ARYA = "Arya"

    @property
    def counterpart(self) -> "Participant":
        """Return the only other participant."""

        return _COUNTERPARTS[self]

    @classmethod
    def parse(cls, value: object) -> "Participant | None":
        """Return the participant named ``value`` or ``None`` when unknown."""

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


_COUNTERPARTS: dict[Participant, Participant] = {
    Participant.SHIVAM: Participant.ARYA,
    Participant.ARYA: Participant.SHIVAM,
}


__all__ = ["Participant"]
