"""
Contracts (trump selection) for Schieber.

Four suit contracts plus Obenabe (top-down, no trump) and Undenufe
(bottom-up, no trump). The forehand may "schieben" once, passing the choice
to their partner.
Multipliers: Eicheln/Rosen ×1, Schellen/Schilten ×2, Obenabe ×3, Undenufe ×4.
"""
from __future__ import annotations

from enum import Enum
from typing import Union

from .deck import Suit


class Contract(str, Enum):
    """The trump regime chosen for a hand."""
    EICHELN = "eicheln"
    SCHELLEN = "schellen"
    ROSEN = "rosen"
    SCHILTEN = "schilten"
    OBENABE = "obenabe"
    UNDENUFE = "undenufe"

    @property
    def trump_suit(self) -> Suit | None:
        """The trump suit for suit contracts, None for Obenabe/Undenufe."""
        if self in (Contract.OBENABE, Contract.UNDENUFE):
            return None
        return Suit(self.value)

    @property
    def multiplier(self) -> int:
        return contract_multiplier(self)


class _Schieben:
    """Marker for passing the contract choice to the partner."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SCHIEBEN"

    def __reduce__(self):
        return (_Schieben, ())


SCHIEBEN = _Schieben()

ContractChoice = Union[Contract, _Schieben]

CONTRACT_NAMES = {
    Contract.EICHELN: "Eicheln",
    Contract.SCHELLEN: "Schellen",
    Contract.ROSEN: "Rosen",
    Contract.SCHILTEN: "Schilten",
    Contract.OBENABE: "Obenabe",
    Contract.UNDENUFE: "Undenufe",
}

_MULTIPLIERS = {
    Contract.EICHELN: 1,
    Contract.ROSEN: 1,
    Contract.SCHELLEN: 2,
    Contract.SCHILTEN: 2,
    Contract.OBENABE: 3,
    Contract.UNDENUFE: 4,
}

_ALIASES = {
    "oben-abe": Contract.OBENABE,
    "obeabe": Contract.OBENABE,
    "top-down": Contract.OBENABE,
    "unden-ufe": Contract.UNDENUFE,
    "uneufe": Contract.UNDENUFE,
    "bottom-up": Contract.UNDENUFE,
}


def contract_multiplier(contract: Contract) -> int:
    """Score multiplier for the contract."""
    return _MULTIPLIERS[contract]


def parse_choice(name: str) -> ContractChoice:
    """
    Parse a contract name as sent by a client ("schellen", "oben-abe",
    "schieben", ...). Raises ValueError for unknown names.
    """
    key = name.strip().lower()
    if key == "schieben":
        return SCHIEBEN
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return Contract(key)
    except ValueError:
        raise ValueError(f"Unknown contract: {name!r}") from None
