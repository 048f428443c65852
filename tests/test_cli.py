import json

import httpx
import pytest

from opsboard import cli


def _client(handler):
    return httpx.Client(base_url="http://opsboard.test", transport=httpx.MockTransport(handler))


def test_parser_defaults():
    args = cli.build_parser().parse_args(["start"])
    assert args.command == "start"
    assert args.scenario == 1

    args = cli.build_parser().parse_args(["remediate", "SYNC_MASTER_DATA", "--node", "dwh"])
    assert (args.action_id, args.node_id) == ("SYNC_MASTER_DATA", "dwh")


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_start_sends_scenario_query():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["s"] = request.url.params.get("s")
        return httpx.Response(200, json={"success": True, "scenario": 2})

    args = cli.build_parser().parse_args(["start", "2"])
    with _client(handler) as client:
        result = cli.run(args, client)
    assert seen == {"method": "POST", "path": "/api/scenario/start", "s": "2"}
    assert result["scenario"] == 2


def test_remediate_sends_json_body():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "message": "ok"})

    args = cli.build_parser().parse_args(["remediate", "ENABLE_QUERY_GOVERNOR"])
    with _client(handler) as client:
        cli.run(args, client)
    assert seen["body"] == {"actionId": "ENABLE_QUERY_GOVERNOR", "nodeId": None}


def test_node_not_found_raises():
    def handler(request):
        return httpx.Response(404, json={"error": "Node not found"})

    args = cli.build_parser().parse_args(["node", "ghost"])
    with _client(handler) as client:
        with pytest.raises(httpx.HTTPStatusError):
            cli.run(args, client)


def test_main_reports_connection_error(capsys):
    code = cli.main(["--base-url", "http://127.0.0.1:9", "status"])
    assert code == 1
    assert "Error" in capsys.readouterr().err


def test_watch_prints_events(capsys):
    body = ""
    for i in range(3):
        data = {"status": {"dwh": {"status": "CRITICAL"}}, "metrics": {}, "incidents": [{"id": "1"}]}
        body += f"event: update\nid: {i}\ndata: {json.dumps(data)}\n\n"

    def handler(request):
        assert request.url.path == "/api/events"
        return httpx.Response(200, text=body, headers={"content-type": "text/event-stream"})

    with _client(handler) as client:
        seen = cli.watch(client, max_events=2)
    out = capsys.readouterr().out.splitlines()
    assert seen == 2
    assert out[0].startswith("#0 incidents=1")
    assert "CRITICAL" in out[1]
