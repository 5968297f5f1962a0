"""Value Object TimeRange - intervalo semiabierto [start, end) de una reserva."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from app.domain.errors import InvalidRangeError


def ensure_utc(value: datetime) -> datetime:
    """Normaliza a UTC; un datetime sin zona se interpreta como UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TimeRange:
    """
    Value Object inmutable que representa un intervalo de tiempo semiabierto.

    Dos reservas consecutivas (una termina a las 10:00 y otra inicia a las 10:00)
    no se superponen.

    Attributes:
        start: Inicio incluido.
        end: Fin excluido.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", ensure_utc(self.start))
        object.__setattr__(self, "end", ensure_utc(self.end))
        if self.start >= self.end:
            raise InvalidRangeError(self.start, self.end)

    @property
    def duration(self) -> timedelta:
        """Retorna la duración del intervalo."""
        return self.end - self.start

    def overlaps_with(self, other: "TimeRange") -> bool:
        """Verifica si este intervalo se superpone con otro."""
        return self.start < other.end and other.start < self.end

    def contains(self, dt: datetime) -> bool:
        return self.start <= ensure_utc(dt) < self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"
