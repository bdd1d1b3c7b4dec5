from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Loading:
    """Operazione avviata, nessun dato ancora disponibile."""

    can_terminate = False

    def to_dict(self) -> Dict[str, Any]:
        return {"status": "loading", "data": None, "message": None}


@dataclass(frozen=True)
class Success(Generic[T]):
    """
    Snapshot con dati. In modalità progressiva possono arrivarne più d'uno:
    vale l'ultimo ricevuto.
    ``can_terminate`` dice solo che questo tipo PUÒ chiudere lo stream: lo
    stato terminale è sempre e soltanto l'ultimo envelope ricevuto.
    """

    data: T

    can_terminate = True

    def to_dict(self) -> Dict[str, Any]:
        return {"status": "success", "data": _serialize(self.data), "message": None}


@dataclass(frozen=True)
class Error(Generic[T]):
    """Stato terminale di errore; ``data`` può portare un payload parziale/stale."""

    message: str
    data: Optional[T] = None

    can_terminate = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "error",
            "data": _serialize(self.data) if self.data is not None else None,
            "message": self.message,
        }


Resource = Union[Loading, Success[T], Error[T]]


def _serialize(data: Any) -> Any:
    to_dict = getattr(data, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return data


# ---------------------------------------------------------------------------
# Esito di un singolo ramo opzionale (fan-out)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, factory: Callable[[], T]) -> T:
        return self.value


@dataclass(frozen=True)
class Failed:
    error: str

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, factory: Callable[[], T]) -> T:
        return factory()


Result = Union[Ok[T], Failed]


def error_message(exc: BaseException, fallback: str) -> str:
    """Messaggio leggibile per l'utente: testo dell'eccezione o fallback generico."""
    text = str(exc).strip()
    return text or fallback


__all__ = [
    "Loading",
    "Success",
    "Error",
    "Resource",
    "Ok",
    "Failed",
    "Result",
    "error_message",
]
