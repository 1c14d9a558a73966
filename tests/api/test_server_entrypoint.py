from api import __main__ as server


def test_main_serves_app_with_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(server.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    server.main(["--host", "0.0.0.0", "--port", "9001"])

    assert calls == [("api.main:app", {"host": "0.0.0.0", "port": 9001, "reload": False})]


def test_defaults():
    args = server.build_parser().parse_args([])

    assert (args.host, args.port, args.reload) == ("127.0.0.1", 8000, False)
