"""Tests for the command-line interface."""

import httpx

from waypoint.cli import main, probe


class TestCheckCommand:
    """Tests for `waypoint check`."""

    def test_valid_config(self, config_file, capsys):
        assert main(["check", "--config", str(config_file)]) == 0
        out = capsys.readouterr().out
        assert "OK (3 pool(s))" in out
        assert "web: 2 domain(s), total weight 4; prefixes [/docs, /docs/v2]; 2 header(s)" in out
        assert "empty: 0 domain(s), total weight 0" in out

    def test_invalid_config(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text('{"web": {"domains": [["a.com", -1]]}}')
        assert main(["check", "--config", str(path)]) == 1
        assert "Invalid pool configuration" in capsys.readouterr().err

    def test_missing_config(self, tmp_path, capsys):
        assert main(["check", "--config", str(tmp_path / "nope.json")]) == 1
        assert "Failed to read" in capsys.readouterr().err


class TestResolveCommand:
    """Tests for `waypoint resolve`."""

    def test_resolve(self, config_file, capsys):
        code = main([
            "resolve", "--config", str(config_file),
            "web", "docs/intro", "--query", "a=1&b=2", "--seed", "3",
        ])
        assert code == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "https://docs.example.com/docs/intro?a=1&b=2"
        assert out[1] == "Headers: Cache-Control: no-store, X-Pool: web"

    def test_resolve_unknown_pool(self, config_file, capsys):
        assert main(["resolve", "--config", str(config_file), "missing", "p"]) == 1
        assert "Pool not found" in capsys.readouterr().err

    def test_resolve_empty_pool(self, config_file, capsys):
        assert main(["resolve", "--config", str(config_file), "empty", "p"]) == 1
        assert "No domains available" in capsys.readouterr().err


class TestProbe:
    """Tests for probing a running instance."""

    def test_probe_builds_request(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(302, headers={"Location": "https://a.example.com/p?x=1"})

        response = probe(
            "http://localhost:8080/", "web", "/p", query="x=1",
            transport=httpx.MockTransport(handler),
        )

        assert seen == ["http://localhost:8080/redirect/web/p?x=1"]
        assert response.status_code == 302
        assert response.headers["location"] == "https://a.example.com/p?x=1"

    def test_probe_does_not_follow(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.host)
            return httpx.Response(302, headers={"Location": "https://elsewhere.example.com/"})

        probe("http://svc", "web", "p", transport=httpx.MockTransport(handler))

        assert calls == ["svc"]
