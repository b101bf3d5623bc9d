"""Startup-time municipality importer.

Fetches a JSON array of names from the configured endpoint and ensures each
one exists in the catalog. Any failure (timeout, non-2xx, empty or malformed
payload) falls back to the built-in list. The import never raises: the
service must start regardless.
"""
import concurrent.futures
import logging
import threading
from typing import Any, Callable, Iterable, Optional

import httpx
from sqlalchemy.orm import Session

from bulky_waste.repositories.municipality_catalog import MunicipalityCatalog

logger = logging.getLogger(__name__)

FALLBACK_MUNICIPALITIES = (
    # Main cities
    "Lisboa", "Porto", "Braga", "Coimbra", "Faro", "Aveiro",
    "Leiria", "Santarém", "Setúbal", "Viana do Castelo",
    "Vila Real", "Bragança", "Guarda", "Castelo Branco",
    "Portalegre", "Évora", "Beja", "Funchal", "Ponta Delgada",
    # Lisbon metropolitan area
    "Almada", "Amadora", "Cascais", "Loures", "Odivelas",
    "Oeiras", "Seixal", "Sintra", "Barreiro", "Montijo",
    "Moita", "Palmela", "Sesimbra", "Alcochete",
    # North
    "Vila Nova de Gaia", "Gondomar", "Matosinhos", "Maia",
    "Trofa", "Santo Tirso", "Valongo", "Vila do Conde",
    "Póvoa de Varzim", "Famalicão", "Guimarães", "Vizela",
    "Felgueiras", "Amarante", "Marco de Canaveses", "Paredes",
    "Penafiel", "Arouca", "Oliveira de Azeméis", "Espinho",
    "Santa Maria da Feira", "Vale de Cambra", "Lousada",
    "Fafe", "Barcelos", "Esposende", "Vila Nova de Cerveira",
    "Monção", "Melgaço", "Arcos de Valdevez", "Ponte de Lima",
    "Ponte da Barca",
    # Centre
    "Tomar", "Abrantes", "Torres Novas", "Ourém",
    "Figueira da Foz", "Mealhada", "Águeda", "Sever do Vouga",
    "Estarreja", "Ílhavo", "Cantanhede", "Oliveira do Bairro",
    "Viseu", "Tondela", "Mangualde", "Nelas", "Carregal do Sal",
    "Fundão", "Covilhã", "Belmonte", "Trancoso", "Pinhel",
    "Sabugal", "Mêda", "Almeida",
    # Alentejo
    "Sines", "Grândola", "Alcácer do Sal", "Serpa",
    "Moura", "Reguengos de Monsaraz", "Montemor-o-Novo",
    "Vendas Novas", "Estremoz", "Elvas", "Campo Maior",
    # Algarve
    "Albufeira", "Lagos", "Loulé", "Portimão", "Tavira",
    "Silves", "Vila Real de Santo António", "Lagoa", "Olhão",
    # Autonomous regions
    "Angra do Heroísmo", "Horta", "Ribeira Grande", "Vila Franca do Campo",
    "Machico", "Câmara de Lobos", "Santa Cruz (Madeira)",
)


class ImportFailed(Exception):
    """The external list could not be used."""


def _get_json(url: str, timeout_s: float, client: Optional[httpx.Client]) -> Any:
    owns_client = client is None
    client = client or httpx.Client()
    try:
        response = client.get(url, timeout=timeout_s)
        response.raise_for_status()
        return response.json()
    finally:
        if owns_client:
            client.close()


def fetch_names(url: str, timeout_ms: int, client: Optional[httpx.Client] = None) -> list[Any]:
    """GET the external list; raises ``ImportFailed`` on anything unusable.

    ``timeout_ms`` bounds the whole request, not each connect or read.
    """
    timeout_s = timeout_ms / 1000
    executor = concurrent.futures.ThreadPoolExecutor(
        max_workers=1, thread_name_prefix="municipality-fetch"
    )
    try:
        future = executor.submit(_get_json, url, timeout_s, client)
        payload = future.result(timeout=timeout_s)
    except (concurrent.futures.TimeoutError, httpx.TimeoutException) as exc:
        raise ImportFailed(f"timed out after {timeout_ms} ms") from exc
    except httpx.HTTPStatusError as exc:
        raise ImportFailed(f"HTTP {exc.response.status_code}") from exc
    except (httpx.HTTPError, ValueError) as exc:
        raise ImportFailed(str(exc) or exc.__class__.__name__) from exc
    finally:
        # a stalled request keeps its worker until httpx gives up on it
        executor.shutdown(wait=False)

    if not isinstance(payload, list):
        raise ImportFailed("payload is not a JSON array")
    if not payload:
        raise ImportFailed("empty municipality list")
    return payload


def store_names(catalog: MunicipalityCatalog, names: Iterable[Any]) -> tuple[int, int]:
    """Ensure every trimmed, non-empty name. Returns ``(created, existing)``."""
    created = existing = 0
    for raw in names:
        if not isinstance(raw, str) or not raw.strip():
            continue
        if catalog.ensure(raw.strip()):
            created += 1
        else:
            existing += 1
    return created, existing


def load_fallback(catalog: MunicipalityCatalog) -> int:
    created, _ = store_names(catalog, FALLBACK_MUNICIPALITIES)
    logger.info("%d built-in municipalities stored", created)
    return created


def import_municipalities(
    db: Session,
    url: str,
    timeout_ms: int = 20000,
    client: Optional[httpx.Client] = None,
) -> tuple[int, int]:
    """Import from ``url``, falling back to the built-in list."""
    catalog = MunicipalityCatalog(db)
    logger.info("Importing municipalities from %s", url)
    try:
        names = fetch_names(url, timeout_ms, client)
    except ImportFailed as exc:
        logger.warning("Municipality import failed (%s); using built-in list", exc)
        return load_fallback(catalog), 0

    created, existing = store_names(catalog, names)
    logger.info(
        "Municipality import done. Created: %d, existing: %d, received: %d",
        created, existing, len(names),
    )
    return created, existing


def run_import(session_factory: Callable[[], Session], url: str, timeout_ms: int) -> None:
    """Importer task body; logs every failure, never raises."""
    db = session_factory()
    try:
        import_municipalities(db, url, timeout_ms)
    except Exception:
        logger.exception("Municipality import aborted")
    finally:
        db.close()


def start_import(session_factory: Callable[[], Session], url: str, timeout_ms: int) -> threading.Thread:
    """Run the import on a daemon thread so startup does not wait for it."""
    worker = threading.Thread(
        target=run_import,
        args=(session_factory, url, timeout_ms),
        name="municipality-import",
        daemon=True,
    )
    worker.start()
    return worker
