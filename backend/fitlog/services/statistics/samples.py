"""
Sample Adapters - Normalize raw records into typed statistics samples.

Records reach the engine either as database rows turned into mappings,
as JSON payloads, or as sample objects built by the caller. Every
source goes through the same adapter so malformed values are handled
in one place:

- unparseable or missing dates drop the whole sample
- NaN, infinite, boolean or non-numeric values become None
"""
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from fitlog.core.logging import get_logger

logger = get_logger(__name__)


CARDIO_TYPE = "cardio"


@dataclass(frozen=True)
class StrengthSample:
    """One strength set used for repetition-max trends."""
    recorded_at: datetime
    weight: Optional[float] = None
    reps: Optional[int] = None


@dataclass(frozen=True)
class CardioSample:
    """One cardio entry. Distance in meters, duration in seconds."""
    recorded_at: datetime
    distance: Optional[float] = None
    duration: Optional[float] = None


@dataclass(frozen=True)
class VolumeSample:
    """One set counted towards training volume."""
    recorded_at: datetime
    weight: Optional[float] = None
    reps: Optional[int] = None
    body_part: Optional[str] = None
    is_cardio: bool = False


@dataclass(frozen=True)
class BodySample:
    """One body log entry; every metric is independently optional."""
    recorded_at: datetime
    height: Optional[float] = None
    body_weight: Optional[float] = None
    muscle_mass: Optional[float] = None
    body_fat: Optional[float] = None


# ========================================
# Value parsing
# ========================================

def parse_recorded_at(value: Any) -> Optional[datetime]:
    """
    Parse a record timestamp into a naive local datetime.

    Accepts datetimes, dates (midnight), ISO-8601 strings and epoch
    milliseconds. Timezone-aware values are converted to the server's
    local time. Returns None for anything else.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def to_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def to_count(value: Any) -> Optional[int]:
    """Return ``value`` as an int when it is a whole finite number."""
    number = to_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def normalize_body_part(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip().lower()
    return text or None


def read_field(raw: Any, names: Sequence[str]) -> Any:
    """Read the first present field of ``names`` from a mapping or object."""
    if isinstance(raw, Mapping):
        for name in names:
            if name in raw:
                return raw[name]
        return None
    for name in names:
        if hasattr(raw, name):
            return getattr(raw, name)
    return None


DATE_FIELDS = ("recorded_at", "recordedAt", "recordDate", "record_date", "date")


# ========================================
# Adapters
# ========================================

class SampleAdapter(ABC):
    """Abstract base class for sample adapters."""

    kind: str = "unknown"

    @abstractmethod
    def normalize(self, raw: Any) -> Optional[Any]:
        """
        Normalize one raw record.

        Args:
            raw: Mapping or object carrying the record fields

        Returns:
            Typed sample, or None when the record has no usable date
        """
        pass

    def normalize_many(self, raws: Iterable[Any]) -> List[Any]:
        """Normalize records, dropping malformed ones."""
        samples = []
        dropped = 0

        for raw in raws:
            sample = self.normalize(raw)
            if sample is None:
                dropped += 1
                continue
            samples.append(sample)

        if dropped:
            logger.debug(
                "Dropped malformed records",
                kind=self.kind,
                dropped=dropped,
                kept=len(samples),
            )

        return samples

    def _recorded_at(self, raw: Any) -> Optional[datetime]:
        return parse_recorded_at(read_field(raw, DATE_FIELDS))


class StrengthAdapter(SampleAdapter):
    """Adapter for strength sets (weight x reps)."""

    kind = "strength"

    def normalize(self, raw: Any) -> Optional[StrengthSample]:
        recorded_at = self._recorded_at(raw)
        if recorded_at is None:
            return None

        return StrengthSample(
            recorded_at=recorded_at,
            weight=to_number(read_field(raw, ("weight",))),
            reps=to_count(read_field(raw, ("reps", "repetitions"))),
        )


class CardioAdapter(SampleAdapter):
    """
    Adapter for cardio entries.

    Distance is expected in meters and duration in seconds, matching
    what the workout logging endpoints store.
    """

    kind = "cardio"

    def normalize(self, raw: Any) -> Optional[CardioSample]:
        recorded_at = self._recorded_at(raw)
        if recorded_at is None:
            return None

        return CardioSample(
            recorded_at=recorded_at,
            distance=to_number(read_field(raw, ("distance",))),
            duration=to_number(
                read_field(raw, ("duration", "durationSeconds", "record_time", "recordTime"))
            ),
        )


class VolumeAdapter(SampleAdapter):
    """Adapter for sets counted towards body-part volume."""

    kind = "volume"

    def normalize(self, raw: Any) -> Optional[VolumeSample]:
        recorded_at = self._recorded_at(raw)
        if recorded_at is None:
            return None

        body_part = normalize_body_part(
            read_field(raw, ("body_part", "bodyPart", "exercise_type", "exerciseType"))
        )
        is_cardio = bool(read_field(raw, ("is_cardio", "isCardio"))) or body_part == CARDIO_TYPE

        return VolumeSample(
            recorded_at=recorded_at,
            weight=to_number(read_field(raw, ("weight",))),
            reps=to_count(read_field(raw, ("reps", "repetitions"))),
            body_part=body_part,
            is_cardio=is_cardio,
        )


class BodyAdapter(SampleAdapter):
    """Adapter for body log entries."""

    kind = "body"

    def normalize(self, raw: Any) -> Optional[BodySample]:
        recorded_at = self._recorded_at(raw)
        if recorded_at is None:
            return None

        return BodySample(
            recorded_at=recorded_at,
            height=to_number(read_field(raw, ("height",))),
            body_weight=to_number(read_field(raw, ("body_weight", "bodyWeight"))),
            muscle_mass=to_number(read_field(raw, ("muscle_mass", "muscleMass"))),
            body_fat=to_number(read_field(raw, ("body_fat", "bodyFat"))),
        )


# Adapter registry
_ADAPTERS = {
    "strength": StrengthAdapter,
    "cardio": CardioAdapter,
    "volume": VolumeAdapter,
    "body": BodyAdapter,
}


def get_adapter(kind: str) -> SampleAdapter:
    """
    Get the adapter for a sample kind.

    Args:
        kind: Sample kind (strength, cardio, volume, body)

    Returns:
        Adapter instance

    Raises:
        ValueError: If the kind is not supported
    """
    adapter_class = _ADAPTERS.get(kind.lower())

    if not adapter_class:
        raise ValueError(f"Unknown sample kind: {kind}")

    return adapter_class()
