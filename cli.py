#!/usr/bin/env python3
"""
Command-line interface for the transaction notification gateway.

Usage:
    uv run python cli.py [command] [options]

Commands:
    demo        Run demo scenarios
    test        Run the test suite
    serve       Start the API server

Examples:
    uv run python cli.py demo single COMPLETED
    uv run python cli.py demo batch --count 10 --missing-token-every 3
    uv run python cli.py serve
"""

import argparse
import subprocess
import sys


def run_demo(flow: str, status: str, count: int, missing_token_every: int) -> None:
    """Run a demo scenario."""
    if flow == "single":
        from domain.models import BusinessStatus
        from gateway.demo import run_single_demo

        if status == "all":
            for business_status in BusinessStatus:
                run_single_demo(business_status)
        else:
            run_single_demo(BusinessStatus(status))

    elif flow == "batch":
        from gateway.demo import run_batch_demo
        run_batch_demo(count=count, missing_token_every=missing_token_every)

    else:
        print(f"Unknown flow: {flow}")
        print("Valid flows: single, batch")
        sys.exit(1)


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    cmd = ["uv", "run", "pytest"] + args
    subprocess.run(cmd)


def run_server(host: str, port: int, reload: bool) -> None:
    """Start the API server."""
    cmd = ["uv", "run", "uvicorn", "api.main:app", f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    subprocess.run(cmd)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Transaction Notification Gateway CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo single REJECTED
  %(prog)s demo single all
  %(prog)s demo batch --count 20 --missing-token-every 5
  %(prog)s test -v
  %(prog)s serve --reload
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demo scenarios")
    demo_parser.add_argument(
        "flow",
        choices=["single", "batch"],
        help="Which processing flow to run",
    )
    demo_parser.add_argument(
        "status",
        nargs="?",
        default="all",
        choices=["COMPLETED", "PENDING", "REJECTED", "all"],
        help="Business status for the single flow",
    )
    demo_parser.add_argument("--count", type=int, default=5, help="Batch size")
    demo_parser.add_argument(
        "--missing-token-every",
        type=int,
        default=0,
        help="Drop the device token on every Nth batch item (0 = never)",
    )

    # Test command
    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    if args.command == "demo":
        run_demo(args.flow, args.status, args.count, args.missing_token_every)
    elif args.command == "test":
        run_tests(args.pytest_args)
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
