from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Awaitable, Callable, List, TypeVar

from core.logging import get_logger
from core.resource import Error, Failed, Loading, Ok, Resource, Result, Success, error_message
from monitoring.prometheus_exporter import record_aggregation, record_branch_failure

log = get_logger("aggregation")

T = TypeVar("T")


def _first_leaf(group: BaseExceptionGroup) -> BaseException:
    exc: BaseException = group
    while isinstance(exc, BaseExceptionGroup):
        exc = exc.exceptions[0]
    return exc


async def run_all(*branches: Awaitable[Any]) -> List[Any]:
    """
    Fan-out/fan-in: esegue i rami in un unico TaskGroup e ne ritorna i risultati
    nell'ordine di chiamata, qualunque sia l'ordine di completamento.
    Il primo ramo che solleva cancella gli altri; l'eccezione esce "scartata"
    dall'ExceptionGroup. Se il task chiamante è stato cancellato esce sempre
    ``CancelledError``, anche quando un ramo ha fallito nello stesso momento.
    """
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(branch) for branch in branches]
    except BaseExceptionGroup as group:
        # Cancellazione esterna arrivata insieme all'errore di un ramo:
        # il TaskGroup la assorbe, qui va ripristinata.
        current = asyncio.current_task()
        if current is not None and current.cancelling():
            raise asyncio.CancelledError from None
        raise _first_leaf(group) from None
    return [task.result() for task in tasks]


async def guarded(
    call: Callable[[], Awaitable[T]],
    *,
    operation: str,
    branch: str,
    failure_label: str,
) -> Result[T]:
    """Ramo opzionale: un errore diventa ``Failed`` invece di interrompere l'aggregazione."""
    try:
        return Ok(await call())
    except Exception as exc:
        message = f"{failure_label}: {exc}"
        log.warning("Ramo opzionale fallito (continuo): %s", message, extra={"stage": branch})
        record_branch_failure(operation, branch)
        return Failed(message)


def terminal_error(operation: str, exc: Exception, fallback: str, **extra: Any) -> Error:
    message = error_message(exc, fallback)
    log.error("%s fallita: %s", operation, message, extra={**extra, "stage": "error"})
    record_aggregation(operation, "error")
    return Error(message)


def terminal_success(operation: str, data: T, **extra: Any) -> Success[T]:
    log.info("%s completata", operation, extra={**extra, "stage": "success"})
    record_aggregation(operation, "success")
    return Success(data)


async def single_shot(
    operation: str,
    load: Callable[[], Awaitable[T]],
    fallback: str,
    **extra: Any,
) -> AsyncIterator[Resource[T]]:
    """Loading -> (Success | Error) per un'operazione con un solo snapshot."""
    log.info("%s avviata", operation, extra={**extra, "stage": "start"})
    yield Loading()
    try:
        data = await load()
    except Exception as exc:
        yield terminal_error(operation, exc, fallback, **extra)
        return
    yield terminal_success(operation, data, **extra)


__all__ = ["run_all", "guarded", "single_shot", "terminal_error", "terminal_success"]
