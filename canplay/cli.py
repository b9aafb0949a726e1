"""
Canplay CLI - Command-line interface for the legality engine.

Usage:
    canplay parse <params_file>      Parse restriction parameters (JSON object)
    canplay check <scenario_file>    Check an action against a table snapshot
    canplay serve                    Run the REST API

A scenario file has the same shape as the body of
POST /api/v1/legality/check: {"table": ..., "card_id": ..., "action": ..., "params": ...}
"""

import argparse
import json
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Canplay - Card Game Action Legality Engine",
        prog="canplay",
    )
    parser.add_argument(
        "--log-level", default="WARNING", help="Logging level (DEBUG shows rejected stages)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse restriction parameters")
    parse_parser.add_argument("params_file", help="Path to a JSON object of script parameters")
    parse_parser.add_argument(
        "--lenient", action="store_true", help="Accept sets that fail semantic validation"
    )

    # Check command
    check_parser = subparsers.add_parser("check", help="Check an action against a table")
    check_parser.add_argument("scenario_file", help="Path to a JSON scenario")
    check_parser.add_argument("--json", action="store_true", help="Print the full report as JSON")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "parse":
        cmd_parse(args)
    elif args.command == "check":
        cmd_check(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _load_json(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {path}: {e}")
        sys.exit(1)


def cmd_parse(args):
    """Parse restriction parameters and print the result."""
    from .api.schemas import ParseRequest
    from .api.service import LegalityService
    from .restriction_schema import RestrictionValidationError

    params = _load_json(args.params_file)
    if not isinstance(params, dict):
        print("Error: Parameters must be a JSON object")
        sys.exit(1)

    service = LegalityService()
    try:
        response = service.parse_restrictions(
            ParseRequest(params=params, strict=not args.lenient)
        )
    except RestrictionValidationError as e:
        print(f"Error: {e}")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)

    print(json.dumps(response.restrictions.model_dump(mode="json"), indent=2))
    if response.unrestricted:
        print("\nNo restrictions.")
    if response.warnings:
        print("\nWarnings:")
        for w in response.warnings:
            print(f"  - {w}")


def cmd_check(args):
    """Check one action and print the verdict."""
    from pydantic import ValidationError
    from .api.schemas import CheckRequest
    from .api.service import LegalityService, UnknownCardError, UnknownPlayerError
    from .engine_core.expression import ExpressionError
    from .restriction_schema import RestrictionValidationError

    scenario = _load_json(args.scenario_file)
    try:
        request = CheckRequest.model_validate(scenario)
    except ValidationError as e:
        print(f"Error: Invalid scenario: {e}")
        sys.exit(1)

    service = LegalityService()
    try:
        response = service.check(request)
    except RestrictionValidationError as e:
        print(f"Error: {e}")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)
    except (UnknownCardError, UnknownPlayerError, ExpressionError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(response.model_dump(mode="json"), indent=2))
    else:
        if response.legal:
            print("Legal")
        else:
            reason = response.failed_stage
            if response.failed_gate:
                reason = f"{reason}: {response.failed_gate}"
            print(f"Not legal ({reason})")
        for stage, verdict in response.stages.items():
            mark = "skipped" if verdict is None else ("pass" if verdict else "FAIL")
            print(f"  {stage:<14} {mark}")
        if response.activator_defaulted:
            print("\nNote: action had no activator; checked for the card's controller")

    if not response.legal:
        sys.exit(1)


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "canplay.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
