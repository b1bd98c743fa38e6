"""Area of law discriminator used to select validation rules."""

from __future__ import annotations

from enum import Enum

from ..exceptions import UnknownAreaOfLawError


_ALIASES = {
    "CIVIL": "LEGAL HELP",
    "CRIME": "CRIME LOWER",
}


class AreaOfLaw(Enum):
    LEGAL_HELP = "LEGAL HELP"
    CRIME_LOWER = "CRIME LOWER"
    MEDIATION = "MEDIATION"

    @classmethod
    def from_value(cls, value: object) -> "AreaOfLaw":
        """Resolve *value* to an area of law.

        Matching ignores case and treats ``_`` as a space. The legacy strategy
        names ``CIVIL`` and ``CRIME`` are accepted. Anything else raises
        :class:`UnknownAreaOfLawError`.
        """

        if isinstance(value, AreaOfLaw):
            return value
        if not isinstance(value, str):
            raise UnknownAreaOfLawError(value)
        text = " ".join(value.replace("_", " ").upper().split())
        text = _ALIASES.get(text, text)
        for member in cls:
            if member.value == text:
                return member
        raise UnknownAreaOfLawError(value)

    def __str__(self) -> str:
        return self.value
