"""
MockAPI Mock Server

FastAPI-based HTTP server that serves configured mock endpoints.

Features:
- Route matching with path parameters
- Request validation and error scenario injection via the response engine
- Dynamic response bodies and simulated latency
- Admin API for metrics and endpoint inspection
"""

from __future__ import annotations  # Enable forward references for type hints

import json
import time
import asyncio
import logging
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from .matcher import EndpointMatcher
from ..engine.models import (
    Endpoint,
    MockResponse,
    OUTCOME_FAILED,
    OUTCOME_INJECTED,
    OUTCOME_ERROR,
)
from ..engine.processor import MockResponseEngine, get_validation_summary
from ..common import EndpointLoader, InvalidRequestBodyError


@dataclass
class MockConfig:
    """Configuration for mock server behavior."""

    # Response behavior
    apply_delays: bool = True  # Hold responses for the engine's advisory delay

    # Dynamic data
    faker_locale: str = "en_US"
    faker_seed: Optional[int] = None  # Seed for reproducible data and draws

    # Fallback behavior
    fallback_status: int = 404
    fallback_body: str = '{"error": "No matching endpoint found"}'

    # Server options
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "info"

    # Admin API
    admin_enabled: bool = True
    admin_prefix: str = "/__admin__"


@dataclass
class MockMetrics:
    """Track mock server metrics."""

    total_requests: int = 0
    matched_requests: int = 0
    unmatched_requests: int = 0
    validation_failures: int = 0
    injected_failures: int = 0
    configuration_errors: int = 0
    start_time: str = field(default_factory=lambda: datetime.now().isoformat())

    def record(self, outcome: str):
        """Count an engine outcome."""
        if outcome == OUTCOME_FAILED:
            self.validation_failures += 1
        elif outcome == OUTCOME_INJECTED:
            self.injected_failures += 1
        elif outcome == OUTCOME_ERROR:
            self.configuration_errors += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        uptime_seconds = (datetime.now() - datetime.fromisoformat(self.start_time)).total_seconds()
        return {
            'total_requests': self.total_requests,
            'matched_requests': self.matched_requests,
            'unmatched_requests': self.unmatched_requests,
            'validation_failures': self.validation_failures,
            'injected_failures': self.injected_failures,
            'configuration_errors': self.configuration_errors,
            'match_rate': round((self.matched_requests / self.total_requests * 100) if self.total_requests > 0 else 0, 2),
            'uptime_seconds': round(uptime_seconds, 2),
            'start_time': self.start_time
        }


class MockServer:
    """
    FastAPI-based mock server for configured endpoints.

    Loads endpoint definitions from a YAML or JSON file and answers each
    request with the response engine's decision, holding the response for
    the engine's advisory delay.

    Example:
        # Load endpoints and start server
        server = MockServer('endpoints.yaml')
        server.start(host='0.0.0.0', port=8080)

        # Reproducible data, no artificial latency
        config = MockConfig(faker_seed=42, apply_delays=False)
        server = MockServer('endpoints.yaml', config=config)
        server.start()
    """

    def __init__(
        self,
        config_file: str,
        config: Optional[MockConfig] = None,
        engine: Optional[MockResponseEngine] = None
    ):
        """
        Initialize mock server.

        Args:
            config_file: Path to endpoint definition file
            config: Optional MockConfig for server behavior
            engine: Optional MockResponseEngine instance (will create if None)

        Raises:
            FileNotFoundError: If the definition file doesn't exist
            ConfigurationError: If an endpoint definition is malformed
        """
        self.config_file = config_file
        self.config = config or MockConfig()
        self.metrics = MockMetrics()

        # Setup logging first (before loading endpoints)
        self.logger = logging.getLogger("mockapi.mock")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self.endpoints = self._load_endpoints()
        self.matcher = EndpointMatcher(self.endpoints)
        self.engine = engine or MockResponseEngine(
            seed=self.config.faker_seed,
            locale=self.config.faker_locale
        )

        self.app = self._create_app()

    def _load_endpoints(self) -> List[Endpoint]:
        """Load and validate endpoint definitions."""
        loader = EndpointLoader(self.config_file)
        endpoints = [Endpoint.from_dict(data) for data in loader.load()]
        self.logger.info(f"Loaded {len(endpoints)} endpoints from {self.config_file}")
        return endpoints

    def _create_app(self) -> FastAPI:
        """Create FastAPI application with routes."""
        app = FastAPI(
            title="MockAPI Server",
            description="Mock HTTP server with validation, error scenarios and dynamic data",
            version="1.0.0"
        )

        if self.config.admin_enabled:
            @app.get(f"{self.config.admin_prefix}/metrics")
            async def get_metrics():
                """Get server metrics."""
                return JSONResponse(content=self.metrics.to_dict())

            @app.get(f"{self.config.admin_prefix}/endpoints")
            async def list_endpoints():
                """List configured endpoints with their validation summaries."""
                endpoints_summary = [
                    {
                        'name': e.name,
                        'collection': e.collection,
                        'method': e.method,
                        'path': e.path,
                        'status': e.response.status_code,
                        'validation': get_validation_summary(e.validation)
                    }
                    for e in self.endpoints
                ]
                return JSONResponse(content={
                    'total': len(endpoints_summary),
                    'endpoints': endpoints_summary
                })

            @app.get(f"{self.config.admin_prefix}/config")
            async def get_config():
                """Get current configuration."""
                return JSONResponse(content={
                    'apply_delays': self.config.apply_delays,
                    'faker_locale': self.config.faker_locale,
                    'faker_seed': self.config.faker_seed,
                    'total_endpoints': len(self.endpoints)
                })

            @app.post(f"{self.config.admin_prefix}/reset")
            async def reset_metrics():
                """Reset metrics."""
                self.metrics = MockMetrics()
                return JSONResponse(content={'status': 'reset'})

        @app.api_route(
            "/{path:path}",
            methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
        )
        async def mock_request(request: Request, path: str):
            """Handle incoming requests and serve mock responses."""
            return await self._handle_request(request)

        return app

    async def _handle_request(self, request: Request) -> Response:
        """
        Handle incoming request and serve mock response.

        Args:
            request: FastAPI Request object

        Returns:
            FastAPI Response with the engine's decision
        """
        start_time = time.time()
        self.metrics.total_requests += 1

        method = request.method
        url = str(request.url)
        body = await request.body()

        self.logger.debug(f"Incoming: {method} {url}")

        match_result = self.matcher.find_match(method, request.url.path)
        if not match_result.matched:
            self.metrics.unmatched_requests += 1
            self.logger.warning(f"No endpoint found for {method} {url}")
            return Response(
                content=self.config.fallback_body,
                status_code=self.config.fallback_status,
                media_type="application/json",
                headers={'X-MockAPI-Matched': 'false'}
            )

        self.metrics.matched_requests += 1
        endpoint = match_result.endpoint

        try:
            result = self.engine.evaluate(body, method, endpoint.validation, endpoint.response)
        except InvalidRequestBodyError as e:
            self.logger.info(f"Rejected body for {method} {url}: {e}")
            return JSONResponse(
                content={'error': str(e), 'code': 'INVALID_JSON'},
                status_code=400
            )

        self.metrics.record(result.outcome)

        if self.config.apply_delays and result.delay_ms > 0:
            await asyncio.sleep(result.delay_ms / 1000)

        elapsed_ms = (time.time() - start_time) * 1000
        self.logger.debug(
            f"{method} {url} -> {result.status_code} [{result.outcome}] ({elapsed_ms:.1f}ms)"
        )

        return self._create_response(endpoint, result)

    def _create_response(self, endpoint: Endpoint, result: MockResponse) -> Response:
        """
        Create FastAPI Response from the engine result.

        Args:
            endpoint: Matched endpoint
            result: Engine output

        Returns:
            FastAPI Response object with MockAPI debug headers
        """
        # Filter headers that FastAPI shouldn't set manually
        headers_to_skip = {'content-length', 'transfer-encoding', 'connection', 'content-type'}
        filtered_headers = {
            k: v for k, v in result.headers.items()
            if k.lower() not in headers_to_skip
        }

        filtered_headers['X-MockAPI-Endpoint'] = endpoint.name
        filtered_headers['X-MockAPI-Outcome'] = result.outcome
        filtered_headers['X-MockAPI-Delay-Ms'] = str(result.delay_ms)

        content_type = next(
            (v for k, v in result.headers.items() if k.lower() == 'content-type'),
            'application/json'
        )

        return Response(
            content=result.body if isinstance(result.body, (bytes, str)) else json.dumps(result.body),
            status_code=result.status_code,
            headers=filtered_headers,
            media_type=content_type
        )

    def start(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        access_log: bool = True
    ):
        """
        Start the mock server.

        Args:
            host: Host to bind to (overrides config)
            port: Port to bind to (overrides config)
            access_log: Enable access logging
        """
        actual_host = host or self.config.host
        actual_port = port or self.config.port

        print(f"🚀 MockAPI Server starting...")
        print(f"   Host: {actual_host}:{actual_port}")
        print(f"   Endpoints loaded: {len(self.endpoints)}")

        if self.config.admin_enabled:
            print(f"   Admin API: http://{actual_host}:{actual_port}{self.config.admin_prefix}/metrics")

        if not self.config.apply_delays:
            print(f"   ⚠️  Response delays disabled")

        print()

        uvicorn.run(
            self.app,
            host=actual_host,
            port=actual_port,
            log_level=self.config.log_level,
            access_log=access_log
        )

    def get_app(self) -> FastAPI:
        """
        Get the FastAPI app instance for testing or custom deployment.

        Returns:
            FastAPI application instance
        """
        return self.app


def create_mock_server(
    config_file: str,
    host: str = "127.0.0.1",
    port: int = 8080,
    apply_delays: bool = True,
    faker_locale: str = "en_US",
    faker_seed: Optional[int] = None,
    admin_enabled: bool = True,
    log_level: str = "info"
) -> MockServer:
    """
    Convenience function to create and configure a mock server.

    Args:
        config_file: Path to endpoint definition file
        host: Host to bind to
        port: Port to bind to
        apply_delays: Hold responses for configured delays
        faker_locale: Faker locale for generated data
        faker_seed: Seed for reproducible data and draws
        admin_enabled: Expose the admin API
        log_level: Logging level

    Returns:
        Configured MockServer instance

    Example:
        server = create_mock_server('endpoints.yaml', port=8080, faker_seed=7)
        server.start()
    """
    config = MockConfig(
        host=host,
        port=port,
        apply_delays=apply_delays,
        faker_locale=faker_locale,
        faker_seed=faker_seed,
        admin_enabled=admin_enabled,
        log_level=log_level
    )

    return MockServer(config_file, config=config)
