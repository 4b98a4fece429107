"""
MockAPI CLI

Command-line interface for the MockAPI server and response engine.

Commands:
    serve       - Start mock HTTP server
    evaluate    - Evaluate one request against a configured endpoint
    summary     - Show endpoints and their validation policies
    tags        - List dynamic data tags
    sample      - Print a sample response template
"""

import argparse
import sys
import json
import logging
from typing import List, Optional

from .common import EndpointLoader, InvalidRequestBodyError, get_seed_from_env
from .engine import (
    Endpoint,
    MockResponseEngine,
    get_validation_summary,
    describe_dynamic_features,
    TAG_CATEGORIES,
    SAMPLE_TEMPLATES,
)
from .mock import MockServer, MockConfig, EndpointMatcher


def _load_endpoints(config_file: str) -> List[Endpoint]:
    try:
        return [Endpoint.from_dict(data) for data in EndpointLoader(config_file).load()]
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Failed to load endpoints: {e}")
        sys.exit(1)


def _resolve_seed(args) -> Optional[int]:
    if getattr(args, 'seed', None) is not None:
        return args.seed
    try:
        return get_seed_from_env()
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(1)


def cmd_serve(args):
    """
    Start mock HTTP server serving configured endpoints.

    Args:
        args: Parsed command-line arguments
    """
    print(f"🎭 MockAPI Server")

    seed = _resolve_seed(args)
    if seed is not None:
        print(f"🎲 Faker seeded ({args.locale}, seed: {seed})")

    config = MockConfig(
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        admin_enabled=not args.no_admin,
        apply_delays=not args.no_delay,
        faker_locale=args.locale,
        faker_seed=seed
    )

    try:
        server = MockServer(args.config_file, config=config)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Failed to create mock server: {e}")
        sys.exit(1)

    try:
        server.start()
    except KeyboardInterrupt:
        print("\n\n👋 Mock server stopped")


def cmd_evaluate(args):
    """
    Evaluate a single request against one endpoint and print the result.

    Args:
        args: Parsed command-line arguments
    """
    endpoints = _load_endpoints(args.config_file)

    if args.endpoint:
        matches = [e for e in endpoints if e.name == args.endpoint]
        endpoint = matches[0] if matches else None
    else:
        result = EndpointMatcher(endpoints).find_match(args.method, args.path or '/')
        endpoint = result.endpoint

    if endpoint is None:
        print(f"❌ No matching endpoint found")
        sys.exit(1)

    engine = MockResponseEngine(seed=_resolve_seed(args), locale=args.locale)
    method = args.method or endpoint.method

    try:
        result = engine.evaluate(args.body, method, endpoint.validation, endpoint.response)
    except InvalidRequestBodyError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(json.dumps(result.to_dict(), indent=2))


def cmd_summary(args):
    """
    Print every endpoint with its validation summary.

    Args:
        args: Parsed command-line arguments
    """
    endpoints = _load_endpoints(args.config_file)

    print(f"📋 {len(endpoints)} endpoints in {args.config_file}")
    for endpoint in endpoints:
        features = describe_dynamic_features(endpoint.response.body, endpoint.response.delay_config)
        feature_text = f" [{', '.join(features)}]" if features else ""
        print(f"   {endpoint.method:7} {endpoint.path:30} {endpoint.response.status_code}  "
              f"{get_validation_summary(endpoint.validation)}{feature_text}")


def cmd_tags(args):
    """List the dynamic data tags by category."""
    for category, tags in TAG_CATEGORIES.items():
        print(f"{category}:")
        print("   " + "  ".join(f"<<{tag}>>" for tag in tags))


def cmd_sample(args):
    """Print a sample response template."""
    print(json.dumps(SAMPLE_TEMPLATES[args.type], indent=2))


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="MockAPI - Mock endpoints with validation, error scenarios and dynamic data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start mock server
  %(prog)s serve endpoints.yaml --port 8080

  # Evaluate a request without starting a server
  %(prog)s evaluate endpoints.yaml --method POST --path /users --body '{"email": "a@b.com"}'

  # Show endpoints and validation policies
  %(prog)s summary endpoints.yaml
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # --- SERVE command ---
    serve_parser = subparsers.add_parser('serve', help='Start mock HTTP server')
    serve_parser.add_argument('config_file', help='Endpoint definition file (YAML or JSON)')
    serve_parser.add_argument('--host', default='127.0.0.1', help='Host to bind (default: 127.0.0.1)')
    serve_parser.add_argument('-p', '--port', type=int, default=8080, help='Port to bind (default: 8080)')
    serve_parser.add_argument('--log-level', default='info', choices=['debug', 'info', 'warning', 'error'],
                              help='Log level (default: info)')
    serve_parser.add_argument('--no-admin', action='store_true', help='Disable admin API')
    serve_parser.add_argument('--no-delay', action='store_true', help='Ignore configured response delays')
    serve_parser.add_argument('--seed', type=int, help='Seed for reproducible data (default: $MOCKAPI_SEED)')
    serve_parser.add_argument('--locale', default='en_US', help='Faker locale (default: en_US)')

    # --- EVALUATE command ---
    evaluate_parser = subparsers.add_parser('evaluate', help='Evaluate one request against an endpoint')
    evaluate_parser.add_argument('config_file', help='Endpoint definition file (YAML or JSON)')
    evaluate_parser.add_argument('-e', '--endpoint', help='Endpoint name')
    evaluate_parser.add_argument('--path', help='Request path used to match an endpoint')
    evaluate_parser.add_argument('-m', '--method', help='HTTP method (default: the endpoint method)')
    evaluate_parser.add_argument('-b', '--body', help='Request body as JSON text')
    evaluate_parser.add_argument('--seed', type=int, help='Seed for reproducible data (default: $MOCKAPI_SEED)')
    evaluate_parser.add_argument('--locale', default='en_US', help='Faker locale (default: en_US)')

    # --- SUMMARY command ---
    summary_parser = subparsers.add_parser('summary', help='Show endpoints and validation policies')
    summary_parser.add_argument('config_file', help='Endpoint definition file (YAML or JSON)')

    # --- TAGS command ---
    subparsers.add_parser('tags', help='List dynamic data tags')

    # --- SAMPLE command ---
    sample_parser = subparsers.add_parser('sample', help='Print a sample response template')
    sample_parser.add_argument('type', choices=sorted(SAMPLE_TEMPLATES), help='Template type')

    args = parser.parse_args(argv)

    if args.command == 'evaluate' and not (args.endpoint or args.path):
        parser.error("evaluate needs --endpoint or --path")
    if args.command == 'evaluate' and args.path and not args.method:
        args.method = 'GET'

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    # Dispatch to command handler
    if args.command == 'serve':
        cmd_serve(args)
    elif args.command == 'evaluate':
        cmd_evaluate(args)
    elif args.command == 'summary':
        cmd_summary(args)
    elif args.command == 'tags':
        cmd_tags(args)
    elif args.command == 'sample':
        cmd_sample(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
