"""End-to-end tests: build a router tree and drive the Mux through ASGI."""

import logging

import pytest

from muxtree import BuilderConfig, HTTPError, Mux, Request, Response, RouterNode
from muxtree.middleware import Handler
from muxtree.testing import TestClient


def tag(name: str):
    def middleware(next: Handler) -> Handler:  # noqa: A002
        async def handler(request: Request) -> Response:
            response = await next(request)
            return response.with_body(f"{name}:{response.text}")

        return handler

    return middleware


def hello(request: Request) -> str:
    return "hello " + request.path_params["name"]


def _subrouter_tree(root_mw=(), child_mw=()) -> RouterNode:
    root = RouterNode().use(*root_mw)
    root.register_patterns(
        {
            "GET /": lambda request: None,
            "OPTIONS /": lambda request: None,
        }
    )
    root.prefix("/a")
    root.register_patterns({"GET /foo": lambda request: "foo"})

    child = root.subrouter().use(*child_mw).prefix("/b")
    child.register_patterns({"GET /bar": lambda request: "bar"})
    return root


class TestPrefixedRoot:
    @pytest.mark.anyio
    async def test_path_param(self) -> None:
        root = RouterNode().prefix("/a")
        root.register_patterns({"GET /test/{name}": hello})

        async with TestClient(root.build()) as client:
            response = await client.get("/a/test/luke")

        assert response.status == 200
        assert response.text == "hello luke"

    @pytest.mark.anyio
    async def test_middleware(self) -> None:
        root = RouterNode().use(tag("M1")).prefix("/a")
        root.register_patterns({"GET /test/{name}": hello})

        async with TestClient(root.build()) as client:
            response = await client.get("/a/test/luke")

        assert response.text == "M1:hello luke"

    @pytest.mark.anyio
    async def test_multiple_middleware(self) -> None:
        root = RouterNode().use(tag("M1"), tag("M2")).prefix("/a")
        root.register_patterns({"GET /test/{name}": hello})

        async with TestClient(root.build()) as client:
            response = await client.get("/a/test/luke")

        assert response.text == "M1:M2:hello luke"

    @pytest.mark.anyio
    async def test_messy_slashes(self) -> None:
        root = RouterNode().prefix("/e")
        root.register_patterns({"GET /////d///f//{id}": lambda r: r.path_params["id"]})
        mux = root.build()

        assert [str(k) for k in mux.registered_patterns] == ["GET /e/d/f/{id}"]
        async with TestClient(mux) as client:
            response = await client.get("/e/d/f/9")
        assert response.text == "9"


class TestSubrouters:
    @pytest.mark.anyio
    @pytest.mark.parametrize(
        ("root_mw", "child_mw", "path", "expected"),
        [
            ((), (), "/a/foo", "foo"),
            (("M1",), (), "/a/foo", "M1:foo"),
            ((), ("M2",), "/a/b/bar", "M2:bar"),
            (("M1",), ("M2",), "/a/foo", "M1:foo"),
            (("M1",), ("M2",), "/a/b/bar", "M1:M2:bar"),
        ],
    )
    async def test_middleware_chaining(
        self,
        root_mw: tuple[str, ...],
        child_mw: tuple[str, ...],
        path: str,
        expected: str,
    ) -> None:
        root = _subrouter_tree(
            root_mw=[tag(n) for n in root_mw],
            child_mw=[tag(n) for n in child_mw],
        )

        async with TestClient(root.build()) as client:
            response = await client.get(path)

        assert response.status == 200
        assert response.text == expected

    @pytest.mark.anyio
    @pytest.mark.parametrize("method", ["GET", "OPTIONS"])
    async def test_unprefixed_root_pattern_no_content(self, method: str) -> None:
        async with TestClient(_subrouter_tree().build()) as client:
            response = await client.request(method, "/")

        assert response.status == 204
        assert response.body == b""

    @pytest.mark.anyio
    async def test_nested_subrouters(self) -> None:
        root = RouterNode().use(tag("M1")).prefix("/a")
        root.handle("GET /foo", lambda r: "foo")

        b = root.subrouter().use(tag("M2")).prefix("/b")
        b.handle("GET /bar", lambda r: "bar")

        c = root.subrouter().prefix("/c")
        c.handle("GET /foobar", lambda r: "foobar")

        d = b.subrouter().prefix("/d")
        d.handle("GET /woo", lambda r: "woo")

        async with TestClient(root.build()) as client:
            assert (await client.get("/a/foo")).text == "M1:foo"
            assert (await client.get("/a/b/bar")).text == "M1:M2:bar"
            assert (await client.get("/a/c/foobar")).text == "M1:foobar"
            assert (await client.get("/a/b/d/woo")).text == "M1:woo"

    @pytest.mark.anyio
    async def test_child_prefix_set_before_parent(self) -> None:
        root = RouterNode()
        child = root.subrouter().prefix("/b")
        root.prefix("/a")
        child.handle("/x", lambda r: "x")

        async with TestClient(root.build()) as client:
            assert (await client.get("/a/b/x")).text == "x"


class TestDispatch:
    @pytest.mark.anyio
    async def test_not_found(self) -> None:
        async with TestClient(RouterNode().build()) as client:
            response = await client.get("/missing")
        assert response.status == 404

    @pytest.mark.anyio
    async def test_method_not_allowed(self) -> None:
        root = RouterNode()
        root.handle("GET /x", lambda r: "x")
        root.handle("PUT /x", lambda r: "x")

        async with TestClient(root.build()) as client:
            response = await client.post("/x")

        assert response.status == 405
        assert response.header("allow") == "GET, PUT"

    @pytest.mark.anyio
    async def test_head_has_no_body(self) -> None:
        root = RouterNode()
        root.handle("GET /x", lambda r: "payload")

        async with TestClient(root.build()) as client:
            response = await client.head("/x")

        assert response.status == 200
        assert response.body == b""
        assert response.header("content-length") == "7"

    @pytest.mark.anyio
    async def test_post_body(self) -> None:
        root = RouterNode()

        @root.route("POST /echo")
        async def echo(request: Request) -> dict:
            return {"got": await request.json()}

        async with TestClient(root.build()) as client:
            response = await client.post("/echo", body=b'{"n": 1}')

        assert response.status == 200
        assert response.text == '{"got": {"n": 1}}'

    @pytest.mark.anyio
    async def test_http_error_from_handler(self) -> None:
        root = RouterNode()

        def teapot(request: Request) -> str:  # noqa: ARG001
            raise HTTPError(status=418, detail="short and stout")

        root.handle("/tea", teapot)

        async with TestClient(root.build()) as client:
            response = await client.get("/tea")

        assert response.status == 418
        assert response.text == "short and stout"

    @pytest.mark.anyio
    async def test_handler_exception_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        root = RouterNode()

        def broken(request: Request) -> str:  # noqa: ARG001
            raise ValueError("boom")

        root.handle("/boom", broken)

        with caplog.at_level(logging.ERROR, logger="muxtree.server"):
            async with TestClient(root.build()) as client:
                response = await client.get("/boom")

        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert "500 GET /boom" in caplog.text

    @pytest.mark.anyio
    async def test_debug_shows_exception(self) -> None:
        root = RouterNode(BuilderConfig(debug=True))

        def broken(request: Request) -> str:  # noqa: ARG001
            raise ValueError("boom")

        root.handle("/boom", broken)

        async with TestClient(root.build()) as client:
            response = await client.get("/boom")

        assert response.status == 500
        assert "ValueError: boom" in response.text

    @pytest.mark.anyio
    async def test_middleware_sees_path_params(self) -> None:
        def add_header(next: Handler) -> Handler:  # noqa: A002
            async def handler(request: Request) -> Response:
                response = await next(request)
                return response.with_header("X-Id", request.path_params["id"])

            return handler

        root = RouterNode().use(add_header)
        root.handle("/items/{id}", lambda r: "item")

        async with TestClient(root.build()) as client:
            response = await client.get("/items/5")

        assert response.header("x-id") == "5"


class TestASGI:
    @pytest.mark.anyio
    async def test_lifespan(self) -> None:
        mux = RouterNode().build()
        incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent: list[dict] = []

        async def receive() -> dict:
            return incoming.pop(0)

        async def send(message: dict) -> None:
            sent.append(message)

        await mux({"type": "lifespan"}, receive, send)

        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]

    @pytest.mark.anyio
    async def test_websocket_scope_closed(self) -> None:
        mux = RouterNode().build()
        sent: list[dict] = []

        async def receive() -> dict:
            return {"type": "websocket.connect"}

        async def send(message: dict) -> None:
            sent.append(message)

        await mux({"type": "websocket", "path": "/"}, receive, send)
        assert sent == [{"type": "websocket.close", "code": 1000}]

    def test_mux_is_exported(self) -> None:
        assert isinstance(RouterNode().build(), Mux)
