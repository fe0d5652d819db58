from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from nurseplan.errors import InvalidInputError, PreferenceValidationError
from nurseplan.week import DayOfWeek, ShiftType, Slot


@dataclass(frozen=True, slots=True)
class ShiftRequirement:
    day_of_week: DayOfWeek
    shift_type: ShiftType
    nurses_required: int

    @property
    def slot(self) -> Slot:
        return (self.day_of_week, self.shift_type)


@dataclass(frozen=True, slots=True)
class Preference:
    day_of_week: DayOfWeek
    shift_type: ShiftType

    @property
    def slot(self) -> Slot:
        return (self.day_of_week, self.shift_type)


@dataclass(frozen=True, slots=True)
class NursePreference:
    """
    A nurse and the (day, shift) slots they asked for.
    An empty `preferences` tuple means the nurse is indifferent.
    """

    nurse_id: int
    preferences: tuple[Preference, ...] = ()

    def __post_init__(self) -> None:
        # accept any iterable, store a tuple so the record stays hashable
        object.__setattr__(self, "preferences", tuple(self.preferences))

    @property
    def is_indifferent(self) -> bool:
        return not self.preferences

    def prefers(self, day: DayOfWeek, shift: ShiftType) -> bool:
        return any(p.day_of_week == day and p.shift_type == shift for p in self.preferences)


@dataclass
class InputData:
    requirements: list[ShiftRequirement]
    nurses: list[NursePreference]
    nurse_ids: list[int] = field(init=False)

    def __post_init__(self) -> None:
        self.nurse_ids = [n.nurse_id for n in self.nurses]

    @property
    def total_required(self) -> int:
        return sum(r.nurses_required for r in self.requirements)

    def required_by_slot(self) -> dict[Slot, int]:
        """Summed requirement per slot (duplicates add up)."""
        out: dict[Slot, int] = {}
        for r in self.requirements:
            out[r.slot] = out.get(r.slot, 0) + r.nurses_required
        return out


# ----------------------------
# Record parsing
# ----------------------------
_DAY_KEYS = ("dayOfWeek", "day_of_week", "day")
_SHIFT_KEYS = ("shift", "shiftType", "shift_type")


def _first(record: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


def parse_day(value: Any) -> DayOfWeek:
    if isinstance(value, DayOfWeek):
        return value
    if isinstance(value, str):
        try:
            return DayOfWeek(value.strip().lower())
        except ValueError:
            pass
    raise PreferenceValidationError(
        'Invalid dayOfWeek value: must be "monday" to "sunday"'
    )


def parse_shift(value: Any) -> ShiftType:
    if isinstance(value, ShiftType):
        return value
    if isinstance(value, str):
        try:
            return ShiftType(value.strip().lower())
        except ValueError:
            pass
    raise PreferenceValidationError('Invalid shift value: must be "day" or "night"')


def parse_preference(record: Any) -> Preference:
    """Build a Preference from a `{"shift": ..., "dayOfWeek": ...}` mapping."""
    if isinstance(record, Preference):
        return record
    if not isinstance(record, Mapping):
        if isinstance(record, (list, tuple)):
            raise PreferenceValidationError(
                "The object must have shift and dayOfWeek properties"
            )
        raise PreferenceValidationError("The value passed is not an object")

    day_raw = _first(record, _DAY_KEYS)
    shift_raw = _first(record, _SHIFT_KEYS)
    if day_raw is None or shift_raw is None:
        raise PreferenceValidationError(
            "The object must have shift and dayOfWeek properties"
        )
    shift = parse_shift(shift_raw)
    day = parse_day(day_raw)
    return Preference(day_of_week=day, shift_type=shift)


def validate_preferences(
    preferences: Iterable[Any], *, allow_empty: bool = True
) -> list[Preference]:
    """
    Validate and convert a list of preference records.

    `allow_empty=False` mirrors the preference store, which refuses to save an
    empty list. The scheduling engine itself treats an empty list as indifferent.
    """
    if isinstance(preferences, (str, bytes)) or not isinstance(preferences, Iterable):
        raise PreferenceValidationError("Preferences must be a list of objects")
    parsed = [parse_preference(p) for p in preferences]
    if not parsed and not allow_empty:
        raise PreferenceValidationError(
            "Preferences array was empty, an empty preference list cannot be stored"
        )
    return parsed


def _parse_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise InvalidInputError(f"{what} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidInputError(f"{what} must be an integer, got {value!r}")


def parse_requirement(record: Any) -> ShiftRequirement:
    """Build a ShiftRequirement from a mapping or pass an existing one through."""
    if isinstance(record, ShiftRequirement):
        return _check_requirement(record)
    if not isinstance(record, Mapping):
        raise InvalidInputError(
            f"Requirement must be a mapping or ShiftRequirement, got {type(record)!r}"
        )
    day_raw = _first(record, _DAY_KEYS)
    shift_raw = _first(record, _SHIFT_KEYS)
    count_raw = _first(record, ("nursesRequired", "nurses_required"))
    if day_raw is None or shift_raw is None or count_raw is None:
        raise InvalidInputError(
            "Requirement must have dayOfWeek, shift and nursesRequired properties"
        )
    try:
        day = parse_day(day_raw)
        shift = parse_shift(shift_raw)
    except PreferenceValidationError as exc:
        raise InvalidInputError(str(exc)) from exc
    req = ShiftRequirement(
        day_of_week=day,
        shift_type=shift,
        nurses_required=_parse_int(count_raw, "nursesRequired"),
    )
    return _check_requirement(req)


def _check_requirement(req: ShiftRequirement) -> ShiftRequirement:
    if not isinstance(req.day_of_week, DayOfWeek) or not isinstance(
        req.shift_type, ShiftType
    ):
        raise InvalidInputError(f"Requirement has an invalid slot: {req!r}")
    if isinstance(req.nurses_required, bool) or not isinstance(req.nurses_required, int):
        raise InvalidInputError(
            f"nursesRequired must be an integer, got {req.nurses_required!r}"
        )
    if req.nurses_required < 0:
        raise InvalidInputError(
            f"nursesRequired must be >= 0, got {req.nurses_required} "
            f"for {req.day_of_week}/{req.shift_type}"
        )
    return req


def parse_nurse_preferences(record: Any) -> NursePreference:
    """Build a NursePreference from `{"nurseId": 1, "preferences": [...]}`."""
    if isinstance(record, NursePreference):
        nurse_id = _parse_int(record.nurse_id, "nurseId")
        for p in record.preferences:
            if not isinstance(p, Preference):
                raise InvalidInputError(
                    f"Preferences of nurse {record.nurse_id} must be Preference objects"
                )
        if nurse_id == record.nurse_id and type(record.nurse_id) is int:
            return record
        return NursePreference(nurse_id=nurse_id, preferences=record.preferences)
    if not isinstance(record, Mapping):
        raise InvalidInputError(
            f"Nurse preference must be a mapping or NursePreference, got {type(record)!r}"
        )
    nurse_raw = _first(record, ("nurseId", "nurse_id", "id"))
    if nurse_raw is None:
        raise InvalidInputError("Nurse preference must have a nurseId property")
    prefs = record.get("preferences") or []
    return NursePreference(
        nurse_id=_parse_int(nurse_raw, "nurseId"),
        preferences=tuple(validate_preferences(prefs)),
    )


def build_input(requirements: Iterable[Any], nurses: Iterable[Any]) -> InputData:
    """
    Normalise requirement and nurse-preference records into InputData.

    Parameters:
    requirements: ShiftRequirement objects or `{"dayOfWeek", "shift", "nursesRequired"}` mappings
    nurses: NursePreference objects or `{"nurseId", "preferences"}` mappings

    Returns:
    InputData: validated input for the generators

    Raises:
    InvalidInputError: on malformed records or duplicate nurse ids
    """
    reqs = [parse_requirement(r) for r in requirements]
    nurse_prefs = [parse_nurse_preferences(n) for n in nurses]

    seen: set[int] = set()
    for n in nurse_prefs:
        if n.nurse_id in seen:
            raise InvalidInputError(f"Duplicate nurseId {n.nurse_id}")
        seen.add(n.nurse_id)

    return InputData(requirements=reqs, nurses=nurse_prefs)
