#!/usr/bin/env python3
"""
OpsBoard 명령행 도구

서버 실행과, 실행 중인 서버에 시나리오 시작/정지, 조치 적용, 상태 조회를
요청하는 간단한 클라이언트입니다.

사용법:
    opsboard serve
    opsboard start 1
    opsboard node dwh
    opsboard remediate ENABLE_QUERY_GOVERNOR --node dwh
    opsboard watch --max-events 5
"""
import argparse
import json
import sys
from typing import Any, List, Optional

import httpx

from opsboard.app.config import settings


def _print(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _request(client: httpx.Client, method: str, path: str, **kwargs) -> Any:
    r = client.request(method, path, **kwargs)
    r.raise_for_status()
    return r.json()


def watch(client: httpx.Client, max_events: Optional[int] = None) -> int:
    """Print SSE snapshot events until interrupted or ``max_events`` is reached."""
    seen = 0
    with client.stream("GET", "/api/events", timeout=None) as r:
        r.raise_for_status()
        event_id = None
        for line in r.iter_lines():
            if line.startswith("id:"):
                event_id = line[3:].strip()
            elif line.startswith("data:"):
                data = json.loads(line[5:].strip())
                health = {nid: n["status"] for nid, n in data["status"].items()}
                print(f"#{event_id} incidents={len(data['incidents'])} {health}")
                seen += 1
                if max_events is not None and seen >= max_events:
                    break
    return seen


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="opsboard", description="OpsBoard system health dashboard")
    parser.add_argument("--base-url", default=settings.BASE_URL, help="Server base URL for client commands")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", default=settings.HOST)
    serve.add_argument("--port", type=int, default=settings.PORT)

    sub.add_parser("topology", help="Show nodes and edges")
    sub.add_parser("status", help="Show per-node health and metrics")
    sub.add_parser("incidents", help="List active incidents")

    node = sub.add_parser("node", help="Drill down into one node")
    node.add_argument("node_id")

    start = sub.add_parser("start", help="Start a scripted scenario")
    start.add_argument("scenario", type=int, nargs="?", default=1)

    sub.add_parser("stop", help="Stop scenarios and reset state")

    rem = sub.add_parser("remediate", help="Apply a remediation action")
    rem.add_argument("action_id")
    rem.add_argument("--node", dest="node_id", default=None)

    w = sub.add_parser("watch", help="Follow the live snapshot stream")
    w.add_argument("--max-events", type=int, default=None)

    return parser


def run(args: argparse.Namespace, client: httpx.Client) -> Any:
    if args.command == "topology":
        return _request(client, "GET", "/api/topology")
    if args.command == "status":
        return _request(client, "GET", "/api/status")
    if args.command == "incidents":
        return _request(client, "GET", "/api/incidents")
    if args.command == "node":
        return _request(client, "GET", f"/api/node/{args.node_id}/drilldown")
    if args.command == "start":
        return _request(client, "POST", "/api/scenario/start", params={"s": args.scenario})
    if args.command == "stop":
        return _request(client, "POST", "/api/scenario/stop")
    if args.command == "remediate":
        return _request(client, "POST", "/api/remediation/apply",
                        json={"actionId": args.action_id, "nodeId": args.node_id})
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        import uvicorn
        uvicorn.run("opsboard.app.main:app", host=args.host, port=args.port)
        return 0

    try:
        with httpx.Client(base_url=args.base_url, timeout=10.0) as client:
            if args.command == "watch":
                watch(client, args.max_events)
            else:
                _print(run(args, client))
    except httpx.HTTPStatusError as e:
        print(f"Error: {e.response.status_code} {e.response.text}", file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
