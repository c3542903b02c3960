# File: src/mstair/pp/base/types.py

from decimal import Decimal
from fractions import Fraction
from typing import Final, Self


__all__ = [
    "MISSING",
    "Missing",
    "PRIMITIVE_TYPES",
    "Sentinel",
    "bool_from_string",
]

# ---------- Runtime tuples (for isinstance/issubclass) ----------

PRIMITIVE_NON_STRING_TYPES: Final[tuple[type, ...]] = (
    int,
    float,
    complex,
    bool,
    Decimal,
    Fraction,
    type(None),
)
PRIMITIVE_TYPES: Final[tuple[type, ...]] = (*PRIMITIVE_NON_STRING_TYPES, str)


class Sentinel:
    """
    Robust singleton base class for sentinel objects such as MISSING.

    Behaves as a falsy, unique, singleton marker, distinct from None.
    """

    __slots__ = ()

    _repr_name: str = "SENTINEL"

    def __repr__(self) -> str:
        return self._repr_name

    def __str__(self) -> str:
        return self._repr_name

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __reduce__(self) -> tuple[type, tuple[()]]:
        return (type(self), ())

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(
        self,
        _memo: dict[int, object],
    ) -> Self:
        return self

    def __new__(cls) -> Self:
        if hasattr(cls, "_instance"):
            return cls._instance
        cls._instance = super().__new__(cls)
        return cls._instance


class Missing(Sentinel):
    """Singleton indicating a missing or unset value (None is a legitimate value here)."""

    _repr_name = "MISSING"


MISSING: Final[Missing] = Missing()


def bool_from_string(value: str | None, default: bool | None = False) -> bool | None:
    """
    Convert an environment-style flag ("1", "true", "yes", "on", ...) to a bool.

    :param value: The string to convert.
    :param default: Returned when the string is None, empty or not a recognized flag.
    :return: A bool, or `default`.
    """
    if value is None or not value.strip():
        return default
    text = value.strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    return default


# End of file: src/mstair/pp/base/types.py
