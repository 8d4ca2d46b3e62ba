# main.py
"""Command-line entry point for the trade admission engine."""
import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from trade_admission.config.settings import Settings
from trade_admission.market.finnhub_provider import FinnhubCalendarProvider
from trade_admission.market.provider import MarketContextProvider
from trade_admission.service import TradeAdmissionService
from trade_admission.stores import JsonAuditSink, load_fixture
from trade_admission.validation.trade_validator import TradeValidator


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate a proposed trade against account risk rules.")
    parser.add_argument("--config", default="config/settings.yaml", help="Settings YAML file")
    parser.add_argument("--accounts", required=True, help="Accounts fixture JSON file")
    parser.add_argument("--request", required=True, help="Validation request JSON file")
    parser.add_argument("--no-audit", action="store_true", help="Do not write audit records")
    return parser.parse_args(argv)


def print_startup_banner(settings: Settings) -> None:
    """Print system startup banner."""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.system.name}")
    logger.info(f"Mode: {settings.system.mode}")
    logger.info(f"Version: {settings.system.version}")
    logger.info("=" * 60)


def load_and_validate_config(config_path: Path) -> Settings:
    """Load and validate configuration.

    Returns:
        Settings object loaded from YAML.

    Raises:
        SystemExit: If config file missing or YAML parsing fails.
    """
    load_dotenv()
    logger.info("✓ Loaded environment variables")

    if not config_path.exists():
        logger.error(f"{config_path} not found")
        sys.exit(1)

    try:
        settings = Settings.from_yaml(config_path)
        logger.info(f"✓ Settings loaded from {config_path}")
    except Exception as e:
        logger.error(f"Failed to parse {config_path}: {e}")
        sys.exit(1)

    return settings


def build_market_provider(settings: Settings) -> Optional[MarketContextProvider]:
    """Create the economic calendar provider, or None without an API key."""
    if not settings.finnhub.api_key:
        logger.warning("FINNHUB_API_KEY not set, news restrictions cannot be verified")
        return None

    provider = FinnhubCalendarProvider(
        config=settings.finnhub,
        timeout=settings.news.fetch_timeout_seconds,
    )
    logger.info("✓ Finnhub calendar provider initialized")
    return provider


def build_service(settings: Settings, accounts_path: Path, audit: bool = True) -> TradeAdmissionService:
    """Wire the validator, stores and providers into a service."""
    account_store, stats_store = load_fixture(accounts_path, datetime.now(timezone.utc).date())
    logger.info(f"✓ Accounts loaded from {accounts_path}")

    validator = TradeValidator.from_settings(settings)
    logger.info(f"✓ TradeValidator initialized ({len(validator.registry)} rules)")

    audit_sink = None
    if audit and settings.audit.enabled:
        audit_sink = JsonAuditSink(settings.audit)
        logger.info(f"✓ Audit trail at {settings.audit.data_dir}")

    return TradeAdmissionService(
        validator=validator,
        account_store=account_store,
        stats_store=stats_store,
        market_provider=build_market_provider(settings),
        audit_sink=audit_sink,
        settings=settings,
    )


async def run(args: argparse.Namespace) -> int:
    settings = load_and_validate_config(Path(args.config))
    print_startup_banner(settings)

    service = build_service(settings, Path(args.accounts), audit=not args.no_audit)

    with open(args.request) as f:
        payload = json.load(f)

    result = await service.validate(payload)
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.allowed else 2


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
