"""Coordinate systems and the capability layer that binds entities to them.

A coordinate system is a stateless tag (``MZ``, ``Mass``, ``Time``,
``IonMobility``). An entity opts into the capability layer by deriving from
``CoordinateLike`` and declaring which tags it has a value for:

- ``stored_coordinates`` maps a tag to a stored, assignable attribute
- ``derived_coordinates`` maps a tag to a computed, read-only attribute

Everything else follows from those two tables. Generic code reads any
coordinate through ``coordinate(inst, system)`` (or ``system.coordinate(inst)``),
writes stored ones through ``set_coordinate`` / ``coordinate_mut``, and every
``CoordinateLike`` instance answers the named accessors (``.mz``,
``.neutral_mass``, ``.time``, ``.ion_mobility``) for each tag it supports.

Examples
--------
>>> from dataclasses import dataclass
>>> @dataclass
... class Scan(CoordinateLike):
...     scan_time: float
...     stored_coordinates = {Time: "scan_time"}
>>> scan = Scan(12.5)
>>> scan.time
12.5
>>> Time.set_coordinate(scan, 13.0)
>>> coordinate(scan, Time)
13.0
"""

import dataclasses
import functools
from typing import Any, ClassVar, Dict, Optional, Type, Union


# =============================================================================
# Coordinate Systems
# =============================================================================

class CoordinateSystem:
    """Base class for coordinate system tags.

    Subclasses name the accessor they grant with a class keyword, e.g.
    ``class MZ(CoordinateSystem, accessor="mz")``. An accessor name can only
    be claimed once, so a tag always has a single meaning.
    """

    __slots__ = ()

    accessor: ClassVar[str] = ""
    _registry: ClassVar[Dict[str, Type["CoordinateSystem"]]] = {}

    def __init_subclass__(cls, accessor: str = "", **kwargs):
        super().__init_subclass__(**kwargs)
        if not accessor:
            raise TypeError(f"{cls.__name__} must declare an accessor name")
        existing = CoordinateSystem._registry.get(accessor)
        if existing is not None:
            raise ValueError(
                f"Accessor '{accessor}' is already bound to {existing.__name__}"
            )
        cls.accessor = accessor
        CoordinateSystem._registry[accessor] = cls

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        return f"{type(self).__name__}()"

    @classmethod
    def coordinate(cls, inst) -> float:
        """Read the coordinate of ``inst`` in this system."""
        return coordinate(inst, cls)

    @classmethod
    def set_coordinate(cls, inst, value: float) -> None:
        """Assign the stored coordinate of ``inst`` in this system."""
        set_coordinate(inst, cls, value)

    @classmethod
    def coordinate_mut(cls, inst) -> "CoordinateRef":
        """Return an assignable handle on the stored coordinate of ``inst``."""
        return coordinate_mut(inst, cls)


class MZ(CoordinateSystem, accessor="mz"):
    """The mass-to-charge ratio (m/z) coordinate system."""

    __slots__ = ()


class Mass(CoordinateSystem, accessor="neutral_mass"):
    """The neutral mass coordinate system."""

    __slots__ = ()


class Time(CoordinateSystem, accessor="time"):
    """The elapsed (retention/event) time coordinate system."""

    __slots__ = ()


class IonMobility(CoordinateSystem, accessor="ion_mobility"):
    """The ion mobility coordinate system."""

    __slots__ = ()


SystemType = Type[CoordinateSystem]
SystemLike = Union[SystemType, CoordinateSystem]


def as_system(system: SystemLike) -> SystemType:
    """Normalize a tag class or tag instance to the tag class.

    Raises
    ------
    TypeError
        If ``system`` is not a concrete coordinate system.
    """
    if isinstance(system, CoordinateSystem):
        return type(system)
    if (
        isinstance(system, type)
        and issubclass(system, CoordinateSystem)
        and system is not CoordinateSystem
    ):
        return system
    raise TypeError(f"Expected a coordinate system, got {system!r}")


# =============================================================================
# Coordinate Capability
# =============================================================================

class CoordinateLike:
    """Mixin for entities that have a coordinate in one or more systems.

    Tables are validated when the class is created: a tag may not be both
    stored and derived, and a stored coordinate must be assignable.
    """

    _read_capability = True

    stored_coordinates: ClassVar[Dict[SystemType, str]] = {}
    derived_coordinates: ClassVar[Dict[SystemType, str]] = {}
    _coordinate_attributes: ClassVar[Dict[SystemType, str]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        stored = {as_system(s): attr for s, attr in cls.stored_coordinates.items()}
        derived = {as_system(s): attr for s, attr in cls.derived_coordinates.items()}

        shared = set(stored) & set(derived)
        if shared:
            names = ", ".join(sorted(s.__name__ for s in shared))
            raise TypeError(f"{cls.__name__} declares {names} as both stored and derived")

        for system, attr in stored.items():
            member = getattr(cls, attr, None)
            if isinstance(member, property) and member.fset is None:
                raise TypeError(
                    f"{cls.__name__}.{attr} is read-only and cannot back a "
                    f"stored {system.__name__} coordinate"
                )

        cls.stored_coordinates = stored
        cls.derived_coordinates = derived
        cls._coordinate_attributes = {**derived, **stored}

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails: grants the named accessor of
        # every supported system.
        system = CoordinateSystem._registry.get(name)
        if system is not None:
            attr = type(self)._coordinate_attributes.get(system)
            if attr is not None and attr != name:
                return float(getattr(self, attr))
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")


class CoordinateRef:
    """Assignable handle on a stored coordinate of one entity."""

    __slots__ = ("_inst", "_attr")

    def __init__(self, inst, attr: str):
        self._inst = inst
        self._attr = attr

    @property
    def value(self) -> float:
        return float(getattr(self._inst, self._attr))

    @value.setter
    def value(self, value: float) -> None:
        setattr(self._inst, self._attr, float(value))

    def __repr__(self):
        return f"CoordinateRef({type(self._inst).__name__}.{self._attr}={self.value})"


def _class_of(obj) -> type:
    return obj if isinstance(obj, type) else type(obj)


def supports(obj, system: SystemLike) -> bool:
    """Whether ``obj`` (instance or class) has a coordinate in ``system``."""
    table = getattr(_class_of(obj), "_coordinate_attributes", None)
    return table is not None and as_system(system) in table


def is_mutable(obj, system: SystemLike) -> bool:
    """Whether ``obj`` (instance or class) stores an assignable ``system`` coordinate."""
    cls = _class_of(obj)
    if not issubclass(cls, CoordinateLike):
        return False
    return as_system(system) in cls.stored_coordinates


def coordinate(inst, system: SystemLike) -> float:
    """Read the coordinate of ``inst`` in ``system``.

    Raises
    ------
    TypeError
        If ``inst`` has no coordinate in ``system``.
    """
    system = as_system(system)
    table = getattr(type(inst), "_coordinate_attributes", None)
    attr = table.get(system) if table is not None else None
    if attr is None:
        raise TypeError(f"{type(inst).__name__} has no {system.__name__} coordinate")
    return float(getattr(inst, attr))


def _stored_attribute(inst, system: SystemType) -> str:
    if not supports(inst, system):
        raise TypeError(f"{type(inst).__name__} has no {system.__name__} coordinate")
    attr = type(inst).stored_coordinates.get(system)
    if attr is None:
        raise TypeError(
            f"The {system.__name__} coordinate of {type(inst).__name__} is derived "
            f"and cannot be assigned"
        )
    return attr


def set_coordinate(inst, system: SystemLike, value: float) -> None:
    """Assign the stored coordinate of ``inst`` in ``system``."""
    system = as_system(system)
    setattr(inst, _stored_attribute(inst, system), float(value))


def coordinate_mut(inst, system: SystemLike) -> CoordinateRef:
    """Return a ``CoordinateRef`` on the stored ``system`` coordinate of ``inst``."""
    system = as_system(system)
    return CoordinateRef(inst, _stored_attribute(inst, system))


def mz(inst) -> float:
    """m/z of any entity with an ``MZ`` coordinate."""
    return coordinate(inst, MZ)


def neutral_mass(inst) -> float:
    """Neutral mass of any entity with a ``Mass`` coordinate."""
    return coordinate(inst, Mass)


def time(inst) -> float:
    """Elapsed time of any entity with a ``Time`` coordinate."""
    return coordinate(inst, Time)


def ion_mobility(inst) -> float:
    """Ion mobility of any entity with an ``IonMobility`` coordinate."""
    return coordinate(inst, IonMobility)


# =============================================================================
# Indexed Coordinate
# =============================================================================

class IndexedCoordinate(CoordinateLike):
    """A coordinate-like entity carrying its position within a collection.

    ``index_coordinate`` names the system the ordinal refers to. The index is
    assigned by whoever owns the collection; nothing here keeps it unique.
    """

    _read_capability = True
    _view_attributes = ("index",)

    index_coordinate: ClassVar[Optional[SystemType]] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.index_coordinate is not None:
            cls.index_coordinate = as_system(cls.index_coordinate)
            if cls.index_coordinate not in cls._coordinate_attributes:
                raise TypeError(
                    f"{cls.__name__} is indexed on {cls.index_coordinate.__name__} "
                    f"but has no such coordinate"
                )

    def get_index(self) -> int:
        return self.index

    def set_index(self, index: int) -> None:
        self.index = int(index)


def is_indexed_on(cls: type, system: SystemLike) -> bool:
    """Whether ``cls`` is an ``IndexedCoordinate`` indexed on ``system``."""
    return (
        isinstance(cls, type)
        and issubclass(cls, IndexedCoordinate)
        and cls.index_coordinate is as_system(system)
    )


# =============================================================================
# Borrowed Views
# =============================================================================

class BorrowedView:
    """Read-only view of a coordinate-like entity.

    Reads delegate to the referent. ``set_index`` is accepted and ignored so
    generic code can treat owned entities and views alike; any other write
    fails.
    """

    _delegated: ClassVar[frozenset] = frozenset()

    def __init__(self, referent):
        object.__setattr__(self, "_referent", referent)

    def __getattr__(self, name: str) -> Any:
        if name in type(self)._delegated:
            return getattr(object.__getattribute__(self, "_referent"), name)
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(
            f"Cannot assign '{name}' through a borrowed view of "
            f"{type(self._referent).__name__}"
        )

    def __delattr__(self, name: str) -> None:
        raise AttributeError(
            f"Cannot delete '{name}' through a borrowed view of "
            f"{type(self._referent).__name__}"
        )

    @property
    def referent(self):
        return self._referent

    def get_index(self) -> int:
        return self._referent.get_index()

    def set_index(self, index: int) -> None:
        pass

    def __str__(self):
        return str(self._referent)

    def __repr__(self):
        return f"borrow({self._referent!r})"


@functools.lru_cache(maxsize=None)
def _view_type(cls: type) -> type:
    capabilities = tuple(
        base for base in cls.__mro__ if base.__dict__.get("_read_capability", False)
    )

    delegated = set(cls._coordinate_attributes.values())
    delegated.update(system.accessor for system in cls._coordinate_attributes)
    for base in capabilities:
        delegated.update(base.__dict__.get("_view_attributes", ()))
    if dataclasses.is_dataclass(cls):
        delegated.update(f.name for f in dataclasses.fields(cls) if not f.name.startswith("_"))

    namespace = {
        "__module__": __name__,
        "__doc__": f"Borrowed read-only view of {cls.__name__}.",
        "stored_coordinates": {},
        "derived_coordinates": dict(cls._coordinate_attributes),
        "_delegated": frozenset(delegated),
    }
    if issubclass(cls, IndexedCoordinate):
        namespace["index_coordinate"] = cls.index_coordinate

    return type(f"Borrowed{cls.__name__}", (BorrowedView,) + capabilities, namespace)


def borrow(inst) -> BorrowedView:
    """Return a read-only ``BorrowedView`` of a coordinate-like entity."""
    if isinstance(inst, BorrowedView):
        return inst
    if not isinstance(inst, CoordinateLike):
        raise TypeError(f"Cannot borrow {type(inst).__name__}: not coordinate-like")
    return _view_type(type(inst))(inst)
