"""Observer runtime entrypoint.

Builds the report publication pipeline from the environment and serves it
behind a Falcon ASGI app on Granian. The scheduler starts with the ASGI
lifespan, fires one cycle immediately and then one every two hours.

Configuration is driven by environment variables:

- ``OBSERVER_HOST``: Bind address (default ``0.0.0.0``)
- ``OBSERVER_PORT``: Listen port (default ``8080``)
- ``OBSERVER_LOG_LEVEL``: Log level (default ``INFO``)
- ``OBSERVER_RUN``: Schedule report cycles (default ``true``)
- ``OBSERVER_WALLET_FILE``: Arweave JWK wallet used to sign reports
- ``OBSERVER_ARWEAVE_URL``, ``OBSERVER_TURBO_UPLOAD_URL``,
  ``OBSERVER_TURBO_PAYMENT_URL``: Service endpoints

Run the service directly with ``python -m observer.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from observer.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

    from observer.api import AppDependencies
    from observer.config import ObserverConfig

__all__ = ["build_dependencies", "create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid OBSERVER_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def build_dependencies(config: ObserverConfig) -> AppDependencies:
    """Wire the wallet, ledger clients, sink, producer and scheduler.

    Parameters
    ----------
    config
        Observer configuration; ``wallet_file`` must be set.

    Returns
    -------
    AppDependencies
        Dependencies for :func:`observer.api.create_app`.

    """
    from observer.api import AppDependencies
    from observer.ledger import (
        ArweaveGatewayConfig,
        ArweaveGraphQLClient,
        TurboClient,
        TurboConfig,
    )
    from observer.reports import (
        EpochReportProducer,
        ReportingService,
        TurboReportSink,
        TurboReportSinkDependencies,
    )
    from observer.scheduler import ReportScheduler
    from observer.signing import ArweaveWallet

    if config.wallet_file is None:
        msg = "OBSERVER_WALLET_FILE is required to publish reports"
        raise ValueError(msg)

    wallet = ArweaveWallet.from_jwk_file(config.wallet_file)
    gateway = ArweaveGraphQLClient(ArweaveGatewayConfig.from_env())
    turbo = TurboClient(TurboConfig.from_env(), wallet)

    sink = TurboReportSink(
        TurboReportSinkDependencies(
            report_lookup=gateway,
            uploader=turbo,
            wallet=wallet,
        )
    )
    producer = EpochReportProducer(
        gateway,
        observer_address=wallet.address,
        epoch_start=config.epoch_start_height,
        epoch_blocks=config.epoch_block_length,
    )
    service = ReportingService(producer, sink)
    log_info(logger, "Publishing reports as %s", wallet.address)
    return AppDependencies(
        reporting_service=service,
        scheduler=ReportScheduler(service.update_current_report),
        closeables=(gateway, turbo),
    )


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from environment configuration.

    When ``OBSERVER_RUN`` is disabled only ``/health`` and ``/ready`` are
    served and no reports are scheduled.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    from observer.api import create_app as _create_api_app
    from observer.config import ObserverConfig

    config = ObserverConfig.from_env()
    if not config.run_observer:
        log_info(logger, "OBSERVER_RUN disabled; serving probes only")
        return _create_api_app()

    return _create_api_app(build_dependencies(config))


def main() -> None:
    """Start the observer runtime server using Granian.

    Reads ``OBSERVER_HOST``, ``OBSERVER_PORT``, and ``OBSERVER_LOG_LEVEL``
    from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("OBSERVER_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("OBSERVER_PORT", "8080"))
    log_level_str = os.environ.get("OBSERVER_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid OBSERVER_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting observer on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "observer.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
