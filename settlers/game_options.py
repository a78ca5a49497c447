"""Game options and their packed string form.

Game options are carried in saved games and network messages as a single
string of ``KEY=value`` pairs separated by commas, for example
``"BC=t4,N7=f7,PL=6,RD=t"``. Boolean values pack as ``t``/``f``; int-bool
options pack as the bool flag followed by the int (``t7``).

Each known option also has a minimum client version. A game's minimum
client version is the highest ``min_version`` among its *active* options,
so that an option left at its default doesn't lock out older clients.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field

from .errors import InvalidArgumentError, MalformedEncodingError

logger = logging.getLogger(__name__)

# Separators within a packed options string
OPTIONS_SEP = ","
KEY_VALUE_SEP = "="

# Number of seats when the PL option isn't set
DEFAULT_MAX_PLAYERS = 4


class OptionType(str, Enum):
    """Game option value type"""
    BOOL = "bool"
    INT = "int"
    INTBOOL = "intbool"
    ENUM = "enum"
    ENUMBOOL = "enumbool"
    STR = "str"
    UNKNOWN = "unknown"


_BOOL_TYPES = (OptionType.BOOL, OptionType.INTBOOL, OptionType.ENUMBOOL)
_INT_TYPES = (OptionType.INT, OptionType.INTBOOL, OptionType.ENUM, OptionType.ENUMBOOL)


class GameOption(BaseModel):
    """One game option and its current value"""
    key: str
    type: OptionType
    bool_value: bool = Field(False, alias="boolValue")
    int_value: int = Field(0, alias="intValue")
    str_value: Optional[str] = Field(None, alias="strValue")
    default_int: int = Field(0, alias="defaultInt")
    min_version: int = Field(-1, alias="minVersion")
    description: str = ""

    class Config:
        populate_by_name = True

    def is_active(self) -> bool:
        """Is this option set to something other than "off"/default?"""
        if self.type in _BOOL_TYPES:
            return self.bool_value
        if self.type in (OptionType.INT, OptionType.ENUM):
            return self.int_value != self.default_int
        if self.type == OptionType.STR:
            return bool(self.str_value)
        return True

    def pack_value(self) -> str:
        """Value portion of this option's ``KEY=value`` pair."""
        if self.type == OptionType.BOOL:
            return "t" if self.bool_value else "f"
        if self.type in (OptionType.INT, OptionType.ENUM):
            return str(self.int_value)
        if self.type in (OptionType.INTBOOL, OptionType.ENUMBOOL):
            return ("t" if self.bool_value else "f") + str(self.int_value)

        value = self.str_value or ""
        if OPTIONS_SEP in value or KEY_VALUE_SEP in value:
            raise InvalidArgumentError(
                f"Option {self.key} value can't contain '{OPTIONS_SEP}' or '{KEY_VALUE_SEP}'",
                argument=self.key,
            )
        return value


def _known(key: str, type_: OptionType, description: str, min_version: int, default_int: int = 0) -> GameOption:
    return GameOption(
        key=key,
        type=type_,
        int_value=default_int,
        default_int=default_int,
        min_version=min_version,
        description=description,
    )


KNOWN_OPTIONS: Dict[str, GameOption] = {
    opt.key: opt
    for opt in (
        _known("PL", OptionType.INT, "Maximum # players", 1108, default_int=DEFAULT_MAX_PLAYERS),
        _known("RD", OptionType.BOOL, "Robber can't return to the desert", 1107),
        _known("N7", OptionType.INTBOOL, "Roll no 7s during first # rounds", 1107, default_int=7),
        _known("BC", OptionType.INTBOOL, "Break up clumps of # or more same-type hexes/ports", 1107, default_int=4),
        _known("NT", OptionType.BOOL, "No trading allowed between players", 1107),
        _known("VP", OptionType.INTBOOL, "Victory points to win: #", 1114, default_int=10),
        _known("SBL", OptionType.BOOL, "Use sea board", 2000),
    )
}


def new_option(key: str, **values) -> GameOption:
    """Copy of a known option with some values set.

    >>> new_option("PL", int_value=6).pack_value()
    '6'
    """
    template = KNOWN_OPTIONS.get(key)
    if template is None:
        raise InvalidArgumentError(f"Unknown game option: {key}", argument=key)
    return template.model_copy(update=values)


def pack_options(opts: Optional[Mapping[str, GameOption]]) -> Optional[str]:
    """Pack options into a string, sorted by key, or None if there are none."""
    if not opts:
        return None
    return OPTIONS_SEP.join(
        f"{key}{KEY_VALUE_SEP}{opts[key].pack_value()}" for key in sorted(opts)
    )


def _parse_bool_flag(key: str, flag: str, packed: str) -> bool:
    if flag == "t":
        return True
    if flag == "f":
        return False
    raise MalformedEncodingError(f"Bad boolean value for option {key}", encoded=packed)


def _parse_int(key: str, value: str, packed: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise MalformedEncodingError(f"Bad integer value for option {key}", encoded=packed) from None


def parse_option(key: str, value: str, packed: str | None = None) -> GameOption:
    """Parse one option's packed value, using the known option's type.

    Unknown keys are kept with type UNKNOWN and their raw value.
    """
    packed = packed if packed is not None else f"{key}{KEY_VALUE_SEP}{value}"
    template = KNOWN_OPTIONS.get(key)
    if template is None:
        logger.debug("Unknown game option %s, keeping raw value", key)
        return GameOption(key=key, type=OptionType.UNKNOWN, str_value=value)

    if template.type == OptionType.BOOL:
        return template.model_copy(update={"bool_value": _parse_bool_flag(key, value, packed)})
    if template.type in (OptionType.INT, OptionType.ENUM):
        return template.model_copy(update={"int_value": _parse_int(key, value, packed)})
    if template.type in (OptionType.INTBOOL, OptionType.ENUMBOOL):
        if len(value) < 2:
            raise MalformedEncodingError(f"Bad int-bool value for option {key}", encoded=packed)
        return template.model_copy(update={
            "bool_value": _parse_bool_flag(key, value[0], packed),
            "int_value": _parse_int(key, value[1:], packed),
        })
    return template.model_copy(update={"str_value": value})


def parse_options(packed: Optional[str]) -> Optional[Dict[str, GameOption]]:
    """Inverse of :func:`pack_options`; None or "" gives None."""
    if not packed:
        return None

    opts: Dict[str, GameOption] = {}
    for item in packed.split(OPTIONS_SEP):
        key, sep, value = item.partition(KEY_VALUE_SEP)
        if not sep or not key:
            raise MalformedEncodingError(f"Bad option pair {item!r}", encoded=packed)
        opts[key] = parse_option(key, value, packed)
    return opts


def min_client_version(opts: Optional[Mapping[str, GameOption]]) -> int:
    """Highest min_version among active options, or -1 if none need one."""
    if not opts:
        return -1
    versions = [opt.min_version for opt in opts.values() if opt.is_active()]
    return max(versions, default=-1)


def max_players_for(opts: Optional[Mapping[str, GameOption]]) -> int:
    """Number of seats for a game with these options."""
    if opts and "PL" in opts:
        return opts["PL"].int_value
    return DEFAULT_MAX_PLAYERS
