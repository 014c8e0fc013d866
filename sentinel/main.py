"""Process bootstrap for Fraud Sentinel."""

import structlog

from sentinel.config import Settings, settings
from sentinel.domains.fraud.collaborators import IPNetworkRegistry, TransactionHistory
from sentinel.domains.fraud.config import FraudConfig
from sentinel.domains.fraud.engine import FraudRiskEngine
from sentinel.shared.logging import setup_logging

logger = structlog.get_logger()


def build_engine(
    app_settings: Settings | None = None,
    fraud_config: FraudConfig | None = None,
    *,
    network_registry: IPNetworkRegistry | None = None,
    history: TransactionHistory | None = None,
    configure_logging: bool = True,
) -> FraudRiskEngine:
    """Configure logging, load FRAUD_* overrides and build an engine instance."""
    app_settings = app_settings or settings
    if configure_logging:
        setup_logging(app_settings.log_level, json_logs=app_settings.log_json)

    config = fraud_config or FraudConfig.from_env()
    logger.info(
        "sentinel_starting",
        app_name=app_settings.app_name,
        version=app_settings.app_version,
        threshold_high=config.thresholds.high,
        threshold_medium=config.thresholds.medium,
        velocity_window_ms=config.velocity.window_ms,
        velocity_max_transactions=config.velocity.max_transactions,
    )
    return FraudRiskEngine(config, network_registry=network_registry, history=history)
