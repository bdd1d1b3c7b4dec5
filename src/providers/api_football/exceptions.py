from typing import Optional


class RateLimitError(Exception):
    """Sollevata quando viene superato il rate limit (HTTP 429) dopo tutti i tentativi di retry."""

    status_code = 429


class TransientAPIError(Exception):
    """Sollevata quando errori transitori (5xx / timeout / connessione) persistono oltre i tentativi massimi."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiFootballHTTPError(Exception):
    """Errore HTTP non recuperabile (4xx diverso da 429 o codici inattesi)."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
