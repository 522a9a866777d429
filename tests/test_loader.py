"""Tests for corpus loading and play ingestion."""

import httpx
import pytest

from shakespeare_qa.core.loader import (
    COMPLETE_WORKS_FILE,
    CorpusLoader,
    LocalCorpusStore,
    PlayFetcher,
)
from shakespeare_qa.errors import (
    CorpusIOError,
    CorpusNotFound,
    DataUnavailable,
    NetworkError,
)

from conftest import make_fetcher, offline_handler

URL = "https://example.test/shakespeare.txt"
RAW_WORKS = "Header text\r\n\r\n\r\nHAMLET\r\n[Enter Ghost]\r\nWho's there?   Nay, answer me.\r\n"


def text_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text=RAW_WORKS)


def make_loader(tmp_path, handler, min_cached_length=10):
    store = LocalCorpusStore(str(tmp_path))
    return CorpusLoader(store, make_fetcher(handler), URL, min_cached_length=min_cached_length)


def test_store_read_missing_raises(tmp_path):
    store = LocalCorpusStore(str(tmp_path / "missing"))
    with pytest.raises(CorpusNotFound):
        store.read(COMPLETE_WORKS_FILE)


def test_store_write_failure_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = LocalCorpusStore(str(blocker))

    with pytest.raises(CorpusIOError) as exc_info:
        store.write(COMPLETE_WORKS_FILE, "text")
    assert exc_info.value.hint


def test_read_cached_ignores_short_copy(tmp_path):
    loader = make_loader(tmp_path, offline_handler, min_cached_length=10)

    loader.store.write(COMPLETE_WORKS_FILE, "too short")
    assert loader.read_cached() is None

    loader.store.write(COMPLETE_WORKS_FILE, "long enough to count as a corpus")
    assert loader.read_cached().text == "long enough to count as a corpus"


async def test_load_prefers_cache(tmp_path):
    loader = make_loader(tmp_path, offline_handler)
    loader.store.write(COMPLETE_WORKS_FILE, "HAMLET Who's there? Nay, answer me.")

    corpus = await loader.load()

    assert corpus.text == "HAMLET Who's there? Nay, answer me."
    assert corpus.source == "MIT OpenCourseWare"


async def test_load_ingests_and_persists(tmp_path):
    loader = make_loader(tmp_path, text_handler)

    corpus = await loader.load()

    assert corpus.text == "HAMLET Who's there? Nay, answer me."
    assert (tmp_path / COMPLETE_WORKS_FILE).read_text(encoding="utf-8") == corpus.text

    manifest = loader.store.read_manifest()
    assert manifest["url"] == URL
    assert manifest["text_length"] == len(corpus.text)


async def test_second_load_works_offline(tmp_path):
    await make_loader(tmp_path, text_handler).load()

    corpus = await make_loader(tmp_path, offline_handler).load()
    assert corpus.text.startswith("HAMLET")


async def test_load_without_any_source_raises(tmp_path):
    loader = make_loader(tmp_path, offline_handler)

    with pytest.raises(DataUnavailable) as exc_info:
        await loader.load()
    assert isinstance(exc_info.value.__cause__, NetworkError)
    assert "ingest" in exc_info.value.hint.lower()


async def test_load_falls_back_to_play_files(tmp_path):
    loader = make_loader(tmp_path, offline_handler)
    loader.store.write("hamlet.txt", "Hamlet text")
    loader.store.write("macbeth.txt", "Macbeth text")

    corpus = await loader.load()

    assert corpus.source == "Local play files"
    assert corpus.text == "Hamlet text\n\nMacbeth text"


async def test_fetch_non_200_raises_network_error():
    fetcher = make_fetcher(lambda request: httpx.Response(503, text="busy"))

    with pytest.raises(NetworkError) as exc_info:
        await fetcher.fetch(URL)
    assert "503" in str(exc_info.value)


async def test_fetch_timeout_raises_network_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(NetworkError) as exc_info:
        await make_fetcher(handler).fetch(URL)
    assert "Timed out" in str(exc_info.value)


PLAY_HTML = """<html><head><title>Hamlet</title><style>body { color: red; }</style></head>
<body><script>var x = 1;</script>
<h3>ACT I</h3><p>SCENE I. Elsinore. A platform before the castle.</p>
<blockquote>[Enter BERNARDO and FRANCISCO]</blockquote>
<p>BERNARDO Who's there?</p><p>FRANCISCO Nay, answer me: stand, and unfold yourself.</p>
<p>BERNARDO Long live the king!</p>
</body></html>"""


def play_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path.endswith("hamlet.html"):
        return httpx.Response(200, text=PLAY_HTML)
    if path.endswith("tiny.html"):
        return httpx.Response(200, text="<html><body>Too short</body></html>")
    return httpx.Response(404, text="missing")


async def test_fetch_play_extracts_body_text(tmp_path):
    plays = PlayFetcher(make_fetcher(play_handler), LocalCorpusStore(str(tmp_path)), "https://example.test/plays/")

    text = await plays.fetch_play("hamlet/hamlet.html")

    assert text.startswith("ACT I SCENE I.")
    assert "var x" not in text
    assert "color" not in text
    assert "[Enter" not in text
    assert "FRANCISCO Nay, answer me" in text


async def test_ingest_plays_skips_failures(tmp_path):
    store = LocalCorpusStore(str(tmp_path))
    plays = PlayFetcher(make_fetcher(play_handler), store, "https://example.test/plays")
    works = (
        ("hamlet", "hamlet/hamlet.html"),
        ("macbeth", "macbeth/macbeth.html"),
        ("tiny", "tiny/tiny.html"),
    )

    saved = await plays.ingest_plays(works)

    assert list(saved) == ["hamlet"]
    assert store.exists("hamlet.txt")
    assert not store.exists("macbeth.txt")
    manifest = store.read_manifest()
    assert manifest["total_plays"] == 1
    assert manifest["plays"] == ["hamlet"]


async def test_ingest_plays_with_nothing_saved_raises(tmp_path):
    plays = PlayFetcher(make_fetcher(offline_handler), LocalCorpusStore(str(tmp_path)), "https://example.test/plays")

    with pytest.raises(DataUnavailable):
        await plays.ingest_plays((("hamlet", "hamlet/hamlet.html"),))
