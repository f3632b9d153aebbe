# reference_tool/sources/inspire.py

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from reference_tool.config.settings import Settings
from reference_tool.errors import (
    FetchError,
    MalformedRecordError,
    MalformedReference,
    PaperNotFoundError,
)
from reference_tool.models.paper import Paper
from reference_tool.models.reference import Reference


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://inspirehep.net/api"
UNKNOWN_TITLE = "Unknown Title"
RETRY_STATUSES = (429, 500, 502, 503, 504)


@dataclass
class InspireClientConfig:
    """
    Configuration for talking to the INSPIRE-HEP literature API.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    max_retries: int = 3
    request_delay: float = 0.1  # seconds between consecutive requests
    backoff_factor: float = 0.5

    @classmethod
    def from_settings(cls, settings: Settings) -> "InspireClientConfig":
        api = settings.api
        return cls(
            base_url=api.base_url.rstrip("/"),
            timeout=float(api.timeout_seconds),
            max_retries=api.max_retries,
            request_delay=api.request_delay_ms / 1000.0,
        )


# ---------------------------------------------------------------------------
# Response parsing helpers
# ---------------------------------------------------------------------------

def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _first(value: Any) -> Dict[str, Any]:
    if isinstance(value, list) and value:
        return _as_dict(value[0])
    return {}


def _str_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _names(entries: Any, key: str) -> List[str]:
    """Collect string values of `key` from a list of objects, skipping junk."""
    if not isinstance(entries, list):
        return []
    return [
        entry[key]
        for entry in entries
        if isinstance(entry, dict) and isinstance(entry.get(key), str)
    ]


def _year_from_date(value: Any) -> Optional[int]:
    """'2023-01-15' -> 2023; anything unparsable -> None."""
    if not isinstance(value, str):
        return None
    head = value.split("-", 1)[0].strip()
    # isdigit() is true for superscripts, which int() rejects
    if not (head.isascii() and head.isdigit()):
        return None
    return int(head)


def parse_paper(data: Any) -> Paper:
    """
    Build a Paper from a literature record's `metadata` object.

    Only `control_number` is mandatory; the rest degrades to defaults.
    """
    data = _as_dict(data)

    control_number = data.get("control_number")
    if isinstance(control_number, bool) or not isinstance(control_number, int) or control_number < 0:
        raise MalformedRecordError("Missing control number")

    preprint_date = data.get("preprint_date")
    if not isinstance(preprint_date, str):
        preprint_date = _first(data.get("imprints")).get("date")

    return Paper(
        id=str(control_number),
        title=_str_or_none(_first(data.get("titles")).get("title")) or UNKNOWN_TITLE,
        authors=_names(data.get("authors"), "full_name"),
        arxiv_id=_str_or_none(_first(data.get("arxiv_eprints")).get("value")),
        categories=_names(data.get("inspire_categories"), "term"),
        year=_year_from_date(preprint_date),
    )


def parse_reference(data: Any) -> Reference:
    """
    Build a Reference from one entry of `metadata.references`.

    The cited record's id is the last path segment of `record.$ref`
    (e.g. ".../api/literature/789012" -> "789012").
    """
    if not isinstance(data, dict):
        raise MalformedReference(f"Reference entry is not an object: {data!r}")

    ref = _as_dict(data.get("reference"))

    inspire_id: Optional[str] = None
    record_url = _as_dict(data.get("record")).get("$ref")
    if isinstance(record_url, str):
        inspire_id = _str_or_none(record_url.rstrip("/").rsplit("/", 1)[-1])

    return Reference(
        title=_str_or_none(_as_dict(ref.get("title")).get("title")) or UNKNOWN_TITLE,
        authors=_names(ref.get("authors"), "full_name"),
        arxiv_id=_str_or_none(ref.get("arxiv_eprint")),
        inspire_id=inspire_id,
        categories=_names(ref.get("inspire_categories"), "term"),
        year=_year_from_date(_as_dict(ref.get("imprint")).get("date")),
    )


def parse_references(entries: Any) -> List[Reference]:
    """Parse a reference list, dropping entries that cannot be parsed."""
    if not isinstance(entries, list):
        return []

    references: List[Reference] = []
    for entry in entries:
        try:
            references.append(parse_reference(entry))
        except MalformedReference as exc:
            logger.debug("Skipping malformed reference: %s", exc)
    return references


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class InspireClient:
    """
    Sequential, rate-limited HTTP client for INSPIRE-HEP.

    Implements the PaperSource protocol:
        - get_paper_by_external_id(arxiv_id) -> Paper
        - get_paper_references(paper_id) -> List[Reference]
    """

    def __init__(
        self,
        config: Optional[InspireClientConfig] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or InspireClientConfig()
        self.base_url: str = self.config.base_url.rstrip("/")
        self.session = session or self._build_session()
        self._last_request_at: Optional[float] = None

    def _build_session(self) -> requests.Session:
        retry = Retry(
            total=self.config.max_retries,
            backoff_factor=self.config.backoff_factor,
            status_forcelist=RETRY_STATUSES,
            allowed_methods=frozenset(["GET"]),
            raise_on_status=False,
        )
        session = requests.Session()
        session.headers.update({"Accept": "application/json"})
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "InspireClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _wait_for_slot(self) -> None:
        if self._last_request_at is None or self.config.request_delay <= 0:
            return
        elapsed = time.monotonic() - self._last_request_at
        remaining = self.config.request_delay - elapsed
        if remaining > 0:
            time.sleep(remaining)

    def _get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        self._wait_for_slot()
        try:
            resp = self.session.get(url, params=params, timeout=self.config.timeout)
        except requests.exceptions.RequestException as exc:
            raise FetchError(f"Error contacting INSPIRE at {url}: {exc}", url=url) from exc
        finally:
            self._last_request_at = time.monotonic()

        if not resp.ok:
            raise FetchError(
                f"INSPIRE returned HTTP {resp.status_code} for {url}",
                status_code=resp.status_code,
                url=url,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise FetchError(
                f"INSPIRE returned a non-JSON body for {url}",
                status_code=resp.status_code,
                url=url,
            ) from exc

        if not isinstance(payload, dict):
            raise FetchError(f"Invalid response format from {url}", url=url)
        return payload

    # ------------------------------------------------------------------
    # PaperSource
    # ------------------------------------------------------------------
    def get_paper_by_external_id(self, external_id: str) -> Paper:
        """Look a paper up by its arXiv identifier."""
        url = f"{self.base_url}/literature"
        query = f"arxiv:{external_id}"
        logger.debug("Searching for paper with query: %s", query)

        payload = self._get_json(url, params={"q": query, "size": "1"})

        hits = _as_dict(payload.get("hits")).get("hits")
        if not isinstance(hits, list):
            raise FetchError(f"Invalid response format from {url}", url=url)
        if not hits:
            raise PaperNotFoundError(
                f"Paper not found with arXiv ID: {external_id}",
                url=url,
            )

        return parse_paper(_as_dict(hits[0]).get("metadata"))

    def get_paper_references(self, paper_id: str) -> List[Reference]:
        url = f"{self.base_url}/literature/{paper_id}"
        logger.debug("Fetching paper details for ID: %s", paper_id)

        payload = self._get_json(url)
        entries = _as_dict(payload.get("metadata")).get("references")
        references = parse_references(entries)

        logger.info("Found %d references for %s", len(references), paper_id)
        return references
