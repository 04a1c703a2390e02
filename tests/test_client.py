import asyncio
from collections import Counter

import httpx
import pytest

from storefront.homepage.cache import ResponseCache
from storefront.homepage.client import StorefrontAPIError, StorefrontClient, cache_key
from storefront.homepage.pipeline import compose_over_http

BASE_URL = "http://storefront.test/api/v1"


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestResponseCache:
    def test_entries_expire_after_ttl(self):
        clock = FakeClock()
        cache = ResponseCache(ttl=300, clock=clock)
        cache.set("k", [1])

        clock.now += 299
        assert cache.get("k") == [1]

        clock.now += 1
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_per_entry_ttl(self):
        clock = FakeClock()
        cache = ResponseCache(ttl=300, clock=clock)
        cache.set("short", "x", ttl=5)

        clock.now += 6
        assert cache.get("short") is None

    def test_clear_matching(self):
        cache = ResponseCache()
        cache.set(cache_key(f"{BASE_URL}/products", {"limit": 4}), [])
        cache.set(cache_key(f"{BASE_URL}/products", {"limit": 8}), [])
        cache.set(cache_key(f"{BASE_URL}/sliders"), [])

        assert cache.clear_matching("/products") == 2
        assert len(cache) == 1

    def test_key_ignores_param_order(self):
        assert cache_key("u", {"a": 1, "b": 2}) == cache_key("u", {"b": 2, "a": 1})


class RecordingTransport:
    def __init__(self, routes):
        self.routes = routes
        self.hits = Counter()
        self.requests = []

    def __call__(self, request):
        path = request.url.path[len("/api/v1"):]
        self.hits[path] += 1
        self.requests.append(request)
        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, json={"error": "NotFound", "message": "No route"})
        if isinstance(route, Exception):
            raise route
        return httpx.Response(200, json=route)


def with_client(transport, scenario, cache=None):
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(transport)) as http:
            client = StorefrontClient(BASE_URL, cache=cache, http=http)
            return await scenario(client)
    return asyncio.run(go())


class TestStorefrontClient:
    def test_repeat_get_is_served_from_cache(self):
        transport = RecordingTransport({"/sliders": [{"id": "s1"}]})

        async def scenario(client):
            first = await client.get("/sliders")
            second = await client.get("/sliders")
            return first, second

        first, second = with_client(transport, scenario)

        assert first == second == [{"id": "s1"}]
        assert transport.hits["/sliders"] == 1

    def test_cache_busting_skips_read_and_write(self):
        transport = RecordingTransport({"/sections/public": []})
        cache = ResponseCache()

        async def scenario(client):
            await client.get("/sections/public", bust=True)
            await client.get("/sections/public", bust=True)

        with_client(transport, scenario, cache=cache)

        assert transport.hits["/sections/public"] == 2
        assert "_t" in transport.requests[0].url.params
        assert len(cache) == 0

    def test_none_params_are_dropped(self):
        transport = RecordingTransport({"/products": []})

        async def scenario(client):
            await client.get("/products", {"limit": 4, "filter": None})

        with_client(transport, scenario)

        assert dict(transport.requests[0].url.params) == {"limit": "4"}

    def test_error_status_carries_code_and_message(self):
        transport = RecordingTransport({})

        async def scenario(client):
            await client.get("/banners/detail/x")

        with pytest.raises(StorefrontAPIError) as excinfo:
            with_client(transport, scenario)

        assert excinfo.value.status_code == 404
        assert "No route" in str(excinfo.value)

    def test_transport_failure(self):
        transport = RecordingTransport({"/sliders": httpx.ConnectError("refused")})

        async def scenario(client):
            await client.get("/sliders")

        with pytest.raises(StorefrontAPIError) as excinfo:
            with_client(transport, scenario)

        assert excinfo.value.status_code is None


class TestComposeOverHttp:
    ROUTES = {
        "/sections/public": [
            {"_id": "hero", "name": "Hero", "type": "heroSlider", "ordering": 0,
             "isActive": True, "isPublished": True, "config": {"sliderIds": ["s1"]}},
            {"_id": "ticker", "name": "Ticker", "type": "scrollingText", "ordering": 1,
             "isActive": True, "isPublished": True, "config": {"items": ["Free delivery"]}},
        ],
        "/sliders": [{"id": "s1", "image": "https://cdn.test/s1.jpg", "isActive": True}],
        "/banners": [],
    }

    def compose(self, transport, cache):
        async def go():
            async with httpx.AsyncClient(transport=httpx.MockTransport(transport)) as http:
                document, _ = await compose_over_http(BASE_URL, cache=cache, http=http)
                return document.to_html()
        return asyncio.run(go())

    def test_warm_cache_gives_the_same_page(self):
        transport = RecordingTransport(self.ROUTES)
        cache = ResponseCache()

        cold = self.compose(transport, cache)
        warm = self.compose(transport, cache)

        assert cold == warm
        assert 'data-section-id="ticker"' in cold
        assert transport.hits["/sliders"] == 1
        assert transport.hits["/sections/public"] == 2
        assert transport.hits["/banners"] == 2
