from __future__ import annotations

import asyncio
import random
import time
from typing import Any, Dict, Optional

import httpx

from core.config import get_settings
from core.logging import get_logger
from .exceptions import ApiFootballHTTPError, RateLimitError, TransientAPIError

log = get_logger(__name__)

_RETRIABLE_STATUS = (500, 502, 503, 504)


class AsyncApiFootballHttpClient:
    """
    Client HTTP asincrono con retry e backoff per API Football (versione httpx).
    Gestisce rate limit (429), errori transitori (5xx, network) e ritorna JSON.

    Ogni chiamata apre un proprio ``httpx.AsyncClient``: più aggregazioni
    concorrenti non condividono stato di connessione né di cancellazione.

    Telemetria minima dell'ultima chiamata conclusa:
      - _last_attempts: numero di tentativi effettuati
      - _last_retries: retries (attempts - 1)
      - _last_latency_ms: durata totale in millisecondi
      - _last_status: ultimo HTTP status code ricevuto (se nessuna risposta -> None)
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = get_settings()
        self._base_url = (base_url or self._settings.api_football_base_url).rstrip("/")
        self._headers = {
            "x-apisports-key": api_key or self._settings.api_football_key,
            "Accept": "application/json",
        }
        self._transport = transport
        self._max_attempts = self._settings.api_football_max_attempts
        self._base = self._settings.api_football_backoff_base
        self._factor = self._settings.api_football_backoff_factor
        self._jitter = self._settings.api_football_backoff_jitter
        self._timeout = self._settings.api_football_timeout

        self._last_attempts: int = 0
        self._last_retries: int = 0
        self._last_latency_ms: float = 0.0
        self._last_status: Optional[int] = None

    def _compute_delay(self, attempt: int) -> float:
        # attempt parte da 1
        delay = self._base * (self._factor ** (attempt - 1))
        if self._jitter > 0:
            mult = random.uniform(1 - self._jitter, 1 + self._jitter)
            delay *= mult
        return delay

    def _record(self, attempt: int, started: float, status: Optional[int]) -> None:
        self._last_attempts = attempt
        self._last_retries = attempt - 1
        self._last_latency_ms = (time.perf_counter() - started) * 1000
        self._last_status = status

    async def api_get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        clean_params = {k: v for k, v in (params or {}).items() if v is not None}
        log.info("api_football GET %s params=%s", path, clean_params)
        url = f"{self._base_url}/{path.lstrip('/')}"
        started = time.perf_counter()
        last_status: Optional[int] = None

        async with httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            for attempt in range(1, self._max_attempts + 1):
                try:
                    resp = await client.get(url, params=clean_params or None)
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    reason = f"network:{e.__class__.__name__}"
                    if attempt == self._max_attempts:
                        self._record(attempt, started, None)
                        raise TransientAPIError(
                            f"Errore di rete persistente dopo {attempt} tentativi: {e}"
                        ) from e
                    wait = self._compute_delay(attempt)
                    log.warning("retry attempt=%s wait=%.2fs reason=%s", attempt, wait, reason)
                    await asyncio.sleep(wait)
                    continue

                last_status = resp.status_code

                if 200 <= resp.status_code < 300:
                    self._record(attempt, started, last_status)
                    try:
                        data = resp.json()
                    except ValueError as e:
                        raise RuntimeError(
                            f"Risposta non valida (non JSON) status={resp.status_code}"
                        ) from e
                    if not isinstance(data, dict):
                        raise RuntimeError(f"Risposta inattesa: atteso oggetto JSON per {path}")
                    log.debug("OK %s %s %.1fms", path, resp.status_code, self._last_latency_ms)
                    return data

                if resp.status_code == 429:
                    if attempt == self._max_attempts:
                        self._record(attempt, started, last_status)
                        raise RateLimitError(f"Rate limit dopo {attempt} tentativi (429).")
                    computed = self._compute_delay(attempt)
                    retry_after = resp.headers.get("Retry-After")
                    wait = computed
                    if retry_after:
                        try:
                            wait = max(computed, float(retry_after))
                        except ValueError:
                            wait = computed
                    log.warning("retry attempt=%s wait=%.2fs reason=rate_limit", attempt, wait)
                    await asyncio.sleep(wait)
                    continue

                if resp.status_code in _RETRIABLE_STATUS:
                    if attempt == self._max_attempts:
                        self._record(attempt, started, last_status)
                        raise TransientAPIError(
                            f"Status {resp.status_code} persistente dopo {attempt} tentativi.",
                            status_code=resp.status_code,
                        )
                    wait = self._compute_delay(attempt)
                    log.warning(
                        "retry attempt=%s wait=%.2fs reason=http_%s",
                        attempt,
                        wait,
                        resp.status_code,
                    )
                    await asyncio.sleep(wait)
                    continue

                # 4xx e altri codici: non recuperabili
                self._record(attempt, started, last_status)
                log.error(
                    "Status %s %s (%.1fms) body=%s",
                    resp.status_code,
                    path,
                    self._last_latency_ms,
                    resp.text[:300],
                )
                raise ApiFootballHTTPError(
                    f"Richiesta API fallita (status={resp.status_code}) non retriable",
                    status_code=resp.status_code,
                )

        # Raggiungibile solo con max_attempts < 1
        raise RuntimeError(f"Fallimento imprevisto path={path} last_status={last_status}")

    def get_stats(self) -> Dict[str, Any]:
        """
        Ritorna telemetria dell'ultima chiamata:
          attempts: tentativi totali
          retries: tentativi falliti (attempts - 1)
          latency_ms: durata complessiva
          last_status: ultimo status code visto (None se mai ricevuta risposta valida)
        """
        return {
            "attempts": self._last_attempts,
            "retries": self._last_retries,
            "latency_ms": round(self._last_latency_ms, 2),
            "last_status": self._last_status,
        }


def get_http_client(**kwargs: Any) -> AsyncApiFootballHttpClient:
    """
    Restituisce sempre una nuova istanza per far sì che i test che
    modificano le variabili d'ambiente abbiano effetto immediato.
    """
    return AsyncApiFootballHttpClient(**kwargs)
