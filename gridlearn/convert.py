"""Filters converting attributes to binary or to floating-point form."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class AttributeKind(enum.Enum):
    """How an attribute's values are represented."""

    CATEGORICAL = "categorical"
    BINARY = "binary"
    FLOAT = "float"


@dataclass(frozen=True)
class Attribute:
    """A named column; categorical ones carry their value names in index order."""

    name: str
    kind: AttributeKind
    values: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))


class _ConvertFilter:
    _target = AttributeKind.BINARY
    _one: float | int = 1
    _zero: float | int = 0

    def __init__(self) -> None:
        self._attrs: list[Attribute] = []
        self._converted: list[tuple[Attribute, Attribute]] = []
        self._two_valued: set[Attribute] = set()
        self._n_valued: dict[Attribute, dict[int, Attribute]] = {}

    def _add(self, attribute: Attribute) -> None:
        if not isinstance(attribute, Attribute):
            raise TypeError(f"not an Attribute: {attribute!r}")
        self._attrs.append(attribute)

    def _pairs(self) -> list[tuple[Attribute, Attribute]]:
        return list(self._converted)

    def _train(self) -> None:
        self._converted = []
        self._two_valued = set()
        self._n_valued = {}
        for attr in self._attrs:
            if attr.kind is AttributeKind.CATEGORICAL:
                if len(attr.values) <= 2:
                    self._converted.append((attr, Attribute(attr.name, self._target)))
                    self._two_valued.add(attr)
                else:
                    mapping = self._n_valued.setdefault(attr, {})
                    for i, value in enumerate(attr.values):
                        new = Attribute(f"{attr.name}_{value}", self._target)
                        self._converted.append((attr, new))
                        mapping[i] = new
            elif attr.kind is self._target:
                self._converted.append((attr, attr))
            elif attr.kind in (AttributeKind.BINARY, AttributeKind.FLOAT):
                self._converted.append((attr, Attribute(attr.name, self._target)))
            else:
                raise ValueError(f"unsupported attribute type: {attr!r}")

    def _categorical(self, old: Attribute, new: Attribute, value: int) -> float | int:
        index = int(value)
        if old in self._two_valued:
            return self._one if index > 0 else self._zero
        mapping = self._n_valued.get(old)
        if mapping is None:
            raise ValueError(f"not a recognised attribute: {old!r}")
        try:
            target = mapping[index]
        except KeyError:
            raise ValueError(f"categorical value {index} not defined for {old.name!r}") from None
        return self._one if target == new else self._zero

    def __str__(self) -> str:
        return f"{type(self).__name__}({len(self._attrs)} Attribute(s))"


class BinaryConvertFilter(_ConvertFilter):
    """Converts attributes to binary (0/1) attributes.

    Floats become 1 when positive, categorical values set the matching binary
    attribute, binary attributes are kept.
    """

    _target = AttributeKind.BINARY
    _one = 1
    _zero = 0

    def add_attribute(self, attribute: Attribute) -> None:
        """Add an attribute to convert."""
        self._add(attribute)

    def train(self) -> None:
        """Work out the binary attributes for every added attribute.

        Categorical attributes of at most two values become one attribute of the
        same name; others become one attribute per value, named ``name_value``.
        """
        self._train()

    def attributes_after_filtering(self) -> list[tuple[Attribute, Attribute]]:
        """Return (old, new) attribute pairs computed by :meth:`train`."""
        return self._pairs()

    def transform(self, old: Attribute, new: Attribute, value: float | int) -> float | int:
        """Return the value of ``new`` given ``value`` of ``old``."""
        if old.kind is AttributeKind.CATEGORICAL:
            return self._categorical(old, new, value)
        if old.kind is AttributeKind.BINARY:
            return value
        if old.kind is AttributeKind.FLOAT:
            return 1 if float(value) > 0 else 0
        raise ValueError(f"unrecognised attribute: {old!r}")


class FloatConvertFilter(_ConvertFilter):
    """Converts attributes to floating-point attributes.

    Binary values become 1.0 or 0.0, categorical values set the matching float
    attribute, float attributes are kept.
    """

    _target = AttributeKind.FLOAT
    _one = 1.0
    _zero = 0.0

    def add_attribute(self, attribute: Attribute) -> None:
        """Add an attribute to convert."""
        self._add(attribute)

    def train(self) -> None:
        """Work out the float attributes for every added attribute.

        Categorical attributes of at most two values become one attribute of the
        same name; others become one attribute per value, named ``name_value``.
        """
        self._train()

    def attributes_after_filtering(self) -> list[tuple[Attribute, Attribute]]:
        """Return (old, new) attribute pairs computed by :meth:`train`."""
        return self._pairs()

    def transform(self, old: Attribute, new: Attribute, value: float | int) -> float | int:
        """Return the value of ``new`` given ``value`` of ``old``."""
        if old.kind is AttributeKind.CATEGORICAL:
            return self._categorical(old, new, value)
        if old.kind is AttributeKind.FLOAT:
            return value
        if old.kind is AttributeKind.BINARY:
            return 1.0 if value > 0 else 0.0
        raise ValueError(f"unrecognised attribute: {old!r}")