"""
Run the FastAPI server.

This script starts the Loan Allocator API server using uvicorn.

Usage:
    python scripts/run_server.py [--port PORT] [--reload]

Options:
    --port PORT: Port to run the server on (default: 8000)
    --reload: Enable auto-reload for development (default: False)
    --host HOST: Host to bind to (default: 0.0.0.0)

Examples:
    # Run with auto-reload for development
    python scripts/run_server.py --reload

    # Run on custom port
    python scripts/run_server.py --port 8080

Environment Variables:
    ALLOCATOR_ALLOW_BANKS_WITHOUT_COVENANTS: Treat banks with no covenant
        rows as unconstrained
"""

import argparse

import uvicorn


def main():
    parser = argparse.ArgumentParser(
        description="Run the Loan Allocator API server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level (default: info)",
    )

    args = parser.parse_args()

    print(f"Starting Loan Allocator API on http://{args.host}:{args.port}")
    print(f"  Mode: {'Development (auto-reload)' if args.reload else 'Production'}")
    print(f"  Docs: http://localhost:{args.port}/docs")

    uvicorn.run(
        "loan_allocator.api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
