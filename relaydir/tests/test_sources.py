"""Source and endpoint resolution tests"""

import json

import httpx
import pytest

from relaydir.core.errors import NoJsonCandidate, NoViableSource
from relaydir.ingestion.file_source import FileSource
from relaydir.ingestion.http_source import HttpSource
from relaydir.ingestion.runner import EndpointResolver

HEADERS = {"User-Agent": "test-agent/1.0", "Accept": "application/json,text/html;q=0.9"}


def make_transport(routes):
    """MockTransport answering by URL path; unknown paths return 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        responder = routes.get(request.url.path)
        if responder is None:
            return httpx.Response(404)
        return responder(request)

    return httpx.MockTransport(handler)


class TestHttpSource:
    """HTTP fetching and content-type handling"""

    @pytest.mark.asyncio
    async def test_json_response(self):
        seen = {}

        def respond(request):
            seen["ua"] = request.headers["user-agent"]
            seen["accept"] = request.headers["accept"]
            return httpx.Response(200, json={"servers": [{"url": "foo.example"}]})

        source = HttpSource(
            "https://relay.test/api/relay.json",
            headers=HEADERS,
            transport=make_transport({"/api/relay.json": respond}),
        )
        payload = await source.fetch()

        assert payload == {"servers": [{"url": "foo.example"}]}
        assert seen == {"ua": "test-agent/1.0", "accept": "application/json,text/html;q=0.9"}

    @pytest.mark.asyncio
    async def test_html_response_uses_embedded_json(self):
        html = '<html><body><script>window.__DATA__ = {"instances":[{"domain":"bar.example"}]};</script></body></html>'
        source = HttpSource(
            "https://relay.test/",
            transport=make_transport({"/": lambda request: httpx.Response(200, html=html)}),
        )
        assert await source.fetch() == {"instances": [{"domain": "bar.example"}]}

    @pytest.mark.asyncio
    async def test_html_without_json(self):
        source = HttpSource(
            "https://relay.test/",
            transport=make_transport({"/": lambda request: httpx.Response(200, html="<p>maintenance</p>")}),
        )
        with pytest.raises(NoJsonCandidate):
            await source.fetch()

    @pytest.mark.asyncio
    async def test_error_status(self):
        source = HttpSource("https://relay.test/missing", transport=make_transport({}))
        with pytest.raises(httpx.HTTPStatusError):
            await source.fetch()

    def test_describe(self):
        assert HttpSource("https://relay.test/").describe("Relay") == "Relay (https://relay.test/)"


class TestFileSource:
    """Local JSON files"""

    @pytest.mark.asyncio
    async def test_reads_json(self, tmp_path):
        path = tmp_path / "seed.json"
        path.write_text(json.dumps({"servers": [{"url": "a.example"}]}), encoding="utf-8")
        assert await FileSource(path).fetch() == {"servers": [{"url": "a.example"}]}

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "seed.json"
        path.write_text("<script>var x = {};</script>", encoding="utf-8")
        with pytest.raises(ValueError):
            await FileSource(path).fetch()

    def test_describe(self, tmp_path):
        assert "seed dataset" in FileSource(tmp_path / "seed.json").describe("Relay")


class TestEndpointResolver:
    """Ordered fallback across candidate sources"""

    @pytest.mark.asyncio
    async def test_falls_through_to_first_viable_source(self):
        calls = []

        def record(response):
            def respond(request):
                calls.append(request.url.path)
                return response

            return respond

        transport = make_transport(
            {
                "/broken": record(httpx.Response(500)),
                "/empty": record(httpx.Response(200, json={"servers": []})),
                "/html": record(httpx.Response(200, html="<script>nope</script>")),
                "/good": record(httpx.Response(200, json={"data": {"relays": [{"host": "ok.example"}]}})),
                "/never": record(httpx.Response(200, json=[{"url": "late.example"}])),
            }
        )
        sources = [
            HttpSource(f"https://relay.test/{name}", transport=transport)
            for name in ("broken", "empty", "html", "good", "never")
        ]

        resolved = await EndpointResolver(sources).resolve()

        assert resolved.source is sources[3]
        assert resolved.records == [{"host": "ok.example"}]
        assert calls == ["/broken", "/empty", "/html", "/good"]

    @pytest.mark.asyncio
    async def test_exhaustion(self, tmp_path):
        sources = [
            HttpSource("https://relay.test/a", transport=make_transport({})),
            FileSource(tmp_path / "missing.json"),
        ]
        with pytest.raises(NoViableSource) as excinfo:
            await EndpointResolver(sources).resolve()
        assert excinfo.value.attempted == ["https://relay.test/a", str(tmp_path / "missing.json")]

    @pytest.mark.asyncio
    async def test_transport_error_is_not_fatal(self):
        def explode(request):
            raise httpx.ConnectError("unreachable", request=request)

        sources = [
            HttpSource("https://down.test/", transport=httpx.MockTransport(explode)),
            HttpSource(
                "https://relay.test/ok",
                transport=make_transport({"/ok": lambda request: httpx.Response(200, json=[{"url": "a.example"}])}),
            ),
        ]
        resolved = await EndpointResolver(sources).resolve()
        assert resolved.source is sources[1]

    @pytest.mark.asyncio
    async def test_deeply_nested_body_is_not_fatal(self, tmp_path):
        """A body too deep for the JSON decoder falls through to the next source"""
        deep = "[" * 100000 + "]" * 100000
        too_deep_file = tmp_path / "deep.json"
        too_deep_file.write_text(deep, encoding="utf-8")

        sources = [
            HttpSource(
                "https://relay.test/deep",
                transport=make_transport(
                    {"/deep": lambda request: httpx.Response(200, content=deep, headers={"content-type": "application/json"})}
                ),
            ),
            FileSource(too_deep_file),
            HttpSource(
                "https://relay.test/ok",
                transport=make_transport({"/ok": lambda request: httpx.Response(200, json=[{"url": "a.example"}])}),
            ),
        ]
        resolved = await EndpointResolver(sources).resolve()

        assert resolved.source is sources[2]
        assert resolved.records == [{"url": "a.example"}]
