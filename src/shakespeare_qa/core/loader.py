"""Corpus loading: local cache, remote fetch and per-play ingestion."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from bs4 import BeautifulSoup

from ..errors import CorpusIOError, CorpusNotFound, DataUnavailable, NetworkError
from .chunker import chunk_text
from .normalizer import clean_play_text, normalize_text

logger = logging.getLogger(__name__)

COMPLETE_WORKS_FILE = "complete_works.txt"
MANIFEST_FILE = "index.json"

# (name, path under the MIT Shakespeare GitHub mirror)
SHAKESPEARE_WORKS: Tuple[Tuple[str, str], ...] = (
    ("hamlet", "hamlet/hamlet.html"),
    ("macbeth", "macbeth/macbeth.html"),
    ("romeo_juliet", "romeo_juliet/romeo_juliet.html"),
    ("lear", "lear/lear.html"),
    ("othello", "othello/othello.html"),
    ("julius_caesar", "julius_caesar/julius_caesar.html"),
    ("merchant", "merchant/merchant.html"),
    ("midsummer", "midsummer/midsummer.html"),
    ("tempest", "tempest/tempest.html"),
    ("twelfth_night", "twelfth_night/twelfth_night.html"),
    ("much_ado", "much_ado/much_ado.html"),
    ("asyoulikeit", "asyoulikeit/asyoulikeit.html"),
    ("taming_shrew", "taming_shrew/taming_shrew.html"),
    ("merry_wives", "merry_wives/merry_wives.html"),
    ("comedy_errors", "comedy_errors/comedy_errors.html"),
    ("two_gentlemen", "two_gentlemen/two_gentlemen.html"),
    ("measure", "measure/measure.html"),
    ("allswell", "allswell/allswell.html"),
    ("cymbeline", "cymbeline/cymbeline.html"),
    ("pericles", "pericles/pericles.html"),
    ("winters_tale", "winters_tale/winters_tale.html"),
    ("henryv", "henryv/henryv.html"),
    ("henryviii", "henryviii/henryviii.html"),
    ("richardii", "richardii/richardii.html"),
    ("richardiii", "richardiii/richardiii.html"),
    ("john", "john/john.html"),
    ("1henryiv", "1henryiv/1henryiv.html"),
    ("2henryiv", "2henryiv/2henryiv.html"),
    ("1henryvi", "1henryvi/1henryvi.html"),
    ("2henryvi", "2henryvi/2henryvi.html"),
    ("3henryvi", "3henryvi/3henryvi.html"),
    ("cleopatra", "cleopatra/cleopatra.html"),
    ("coriolanus", "coriolanus/coriolanus.html"),
    ("titus", "titus/titus.html"),
    ("timon", "timon/timon.html"),
    ("troilus_cressida", "troilus_cressida/troilus_cressida.html"),
    ("lll", "lll/lll.html"),
)

# Reduced list used by the keyword-only (Gemini) ingestion
CORE_WORKS = SHAKESPEARE_WORKS[:10]

MIN_PLAY_LENGTH = 100


@dataclass(frozen=True)
class Corpus:
    """Full normalized text of the works under query."""
    text: str
    source: str

    def __len__(self) -> int:
        return len(self.text)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class LocalCorpusStore:
    """Flat text files in a data directory."""

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def path(self, name: str) -> Path:
        return self.data_dir / name

    def exists(self, name: str) -> bool:
        return self.path(name).is_file()

    def read(self, name: str) -> str:
        """Read a stored text.

        Raises:
            CorpusNotFound: If the file is missing or unreadable
        """
        file_path = self.path(name)
        try:
            return file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise CorpusNotFound(f"No stored text at {file_path}")
        except OSError as e:
            raise CorpusNotFound(f"Could not read {file_path}: {e}")

    def write(self, name: str, text: str) -> Path:
        """Write a text, replacing any previous version.

        Raises:
            CorpusIOError: If the data directory cannot be written
        """
        file_path = self.path(name)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            file_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise CorpusIOError(f"Failed to write {file_path}: {e}")

        logger.info(f"Saved {file_path} ({len(text)} chars)")
        return file_path

    def list_texts(self, exclude: Sequence[str] = ()) -> List[str]:
        """List stored ``.txt`` files by name, sorted."""
        if not self.data_dir.is_dir():
            return []
        return sorted(
            p.name for p in self.data_dir.glob("*.txt")
            if p.is_file() and p.name not in exclude
        )

    def write_manifest(self, data: Dict[str, Any]) -> Path:
        """Write the ingestion manifest (``index.json``)."""
        return self.write(MANIFEST_FILE, json.dumps(data, indent=2))

    def read_manifest(self) -> Optional[Dict[str, Any]]:
        try:
            return json.loads(self.read(MANIFEST_FILE))
        except (CorpusNotFound, json.JSONDecodeError):
            return None


class RemoteCorpusFetcher:
    """Fetch raw text over HTTP."""

    def __init__(self, timeout: float = 60.0, client: Optional[httpx.AsyncClient] = None):
        """Initialize fetcher.

        Args:
            timeout: Request timeout in seconds
            client: Optional pre-built HTTP client (e.g. with a mock transport)
        """
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def fetch(self, url: str) -> str:
        """Fetch a URL and return its body as text.

        Raises:
            NetworkError: On connection failure, timeout or non-200 status
        """
        logger.info(f"Fetching {url}")

        try:
            response = await self.client.get(url)
        except httpx.TimeoutException:
            raise NetworkError(f"Timed out fetching {url} after {self.timeout}s")
        except httpx.RequestError as e:
            raise NetworkError(f"Failed to fetch {url}: {e}")

        if response.status_code != 200:
            raise NetworkError(f"Failed to fetch {url}: HTTP {response.status_code}")

        return response.text

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()


class CorpusLoader:
    """Load the complete works, ingesting them on first use."""

    def __init__(
        self,
        store: LocalCorpusStore,
        fetcher: RemoteCorpusFetcher,
        url: str,
        min_cached_length: int = 1000
    ):
        """Initialize loader.

        Args:
            store: Local store holding the cached corpus
            fetcher: Remote fetcher used when no cached copy exists
            url: URL of the plain-text complete works
            min_cached_length: Cached copies shorter than this are ignored
        """
        self.store = store
        self.fetcher = fetcher
        self.url = url
        self.min_cached_length = min_cached_length

    def read_cached(self) -> Optional[Corpus]:
        """Return the cached complete works, or None if absent or too short."""
        try:
            text = self.store.read(COMPLETE_WORKS_FILE)
        except CorpusNotFound:
            return None

        if len(text) <= self.min_cached_length:
            logger.info(f"Ignoring cached corpus shorter than {self.min_cached_length} chars")
            return None

        return Corpus(text=text, source="MIT OpenCourseWare")

    async def ingest(self) -> Corpus:
        """Fetch, normalize and persist the complete works.

        Raises:
            NetworkError: If the remote fetch fails
            DataUnavailable: If the fetched text is empty after cleanup
            CorpusIOError: If the cached copy cannot be written
        """
        raw = await self.fetcher.fetch(self.url)
        text = normalize_text(raw)
        if not text:
            raise DataUnavailable(f"Fetched text from {self.url} was empty after cleanup")

        self.store.write(COMPLETE_WORKS_FILE, text)
        self.store.write_manifest({
            "source": "MIT OpenCourseWare",
            "url": self.url,
            "timestamp": _timestamp(),
            "text_length": len(text),
            "note": "Complete works from MIT OpenCourseWare",
        })

        logger.info(f"Ingested {len(text)} characters of Shakespeare text")
        return Corpus(text=text, source="MIT OpenCourseWare")

    async def load(self) -> Corpus:
        """Return the corpus from cache, remote source, or stored play files.

        Raises:
            DataUnavailable: If no source is reachable
            CorpusIOError: If a fetched corpus cannot be persisted
        """
        cached = self.read_cached()
        if cached is not None:
            logger.info("Using existing complete works from local cache")
            return cached

        logger.info("No cached corpus found, triggering ingestion")
        try:
            return await self.ingest()
        except NetworkError as e:
            logger.warning(f"Remote ingestion failed: {e}")
            plays = self._read_play_files()
            if plays:
                logger.info("Falling back to individually ingested play files")
                return Corpus(text="\n\n".join(plays), source="Local play files")
            raise DataUnavailable(f"No Shakespeare data available: {e}") from e

    def _read_play_files(self) -> List[str]:
        texts = []
        for name in self.store.list_texts(exclude=(COMPLETE_WORKS_FILE,)):
            try:
                texts.append(self.store.read(name))
            except CorpusNotFound as e:
                logger.warning(f"Could not read {name}: {e}")
        return [t for t in texts if t]


class PlayFetcher:
    """Ingest individual plays from HTML pages."""

    def __init__(
        self,
        fetcher: RemoteCorpusFetcher,
        store: LocalCorpusStore,
        base_url: str,
        chunk_size: int = 1000,
        chunk_overlap: int = 200
    ):
        self.fetcher = fetcher
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    async def fetch_play(self, play_path: str) -> str:
        """Fetch one play page and return its cleaned body text."""
        html = await self.fetcher.fetch(f"{self.base_url}/{play_path}")
        soup = BeautifulSoup(html, "html.parser")

        for tag in soup(["script", "style"]):
            tag.decompose()

        body = soup.body or soup
        return clean_play_text(body.get_text(" "))

    async def ingest_plays(
        self,
        works: Sequence[Tuple[str, str]] = SHAKESPEARE_WORKS,
        note: str = "Individual play files"
    ) -> Dict[str, str]:
        """Fetch and persist each play.

        A play that fails to download or is shorter than 100 characters is
        skipped.

        Returns:
            Mapping of play name to text for every saved play

        Raises:
            DataUnavailable: If no play could be ingested
            CorpusIOError: If a play cannot be persisted
        """
        plays: Dict[str, str] = {}

        for name, play_path in works:
            logger.info(f"Ingesting {name}...")
            try:
                text = await self.fetch_play(play_path)
            except NetworkError as e:
                logger.error(f"Error fetching {play_path}: {e}")
                continue

            if len(text) <= MIN_PLAY_LENGTH:
                logger.warning(f"Skipping {name}: only {len(text)} chars")
                continue

            self.store.write(f"{name}.txt", text)
            plays[name] = text

        if not plays:
            raise DataUnavailable("No Shakespeare works were successfully fetched.")

        self.store.write_manifest({
            "source": "GitHub Repository",
            "url": self.base_url,
            "total_plays": len(plays),
            "total_chunks": sum(len(chunk_text(t, self.chunk_size, self.chunk_overlap)) for t in plays.values()),
            "plays": list(plays),
            "timestamp": _timestamp(),
            "note": note,
        })
        return plays
