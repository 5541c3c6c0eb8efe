"""Main entry point for the healthmon system health dashboard."""
import argparse
import os

from .collectors.system_collector import SystemCollector
from .config.config_manager import ConfigManager
from .config.setup_state import SetupState
from .core.metric_store import MetricStore
from .core.navigation import NavigationStateMachine
from .core.refresh import RefreshOrchestrator
from .logger import setup_logging
from .ui.display_manager import DisplayManager


def default_config_path() -> str:
    return os.path.join(os.path.dirname(__file__), 'config', 'default_config.yaml')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="System health dashboard")
    parser.add_argument("--config", default=default_config_path())
    parser.add_argument("--refresh-rate", type=float, default=None,
                        help="seconds between refresh cycles (overrides the config file)")
    parser.add_argument("--no-color", action="store_true")
    parser.add_argument("--log-file", default=None,
                        help="write logs to this file instead of the Textual console")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv=None):
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)

    logger = setup_logging(args.log_level, args.log_file)

    # Load configuration - let it crash if bad
    config = ConfigManager.load_config(args.config)
    if args.refresh_rate is not None and args.refresh_rate > 0:
        config.refresh_rate = args.refresh_rate
    if args.no_color:
        config.display.show_colors = False

    provider = SystemCollector(config)
    store = MetricStore(config.thresholds, config.max_alerts)
    orchestrator = RefreshOrchestrator(provider, store, config.refresh_rate)
    display_manager = DisplayManager(
        config,
        provider,
        store,
        NavigationStateMachine(),
        orchestrator,
        SetupState(config.state_path),
    )

    logger.info(f"Starting healthmon with refresh rate {config.refresh_rate}s")
    try:
        display_manager.run()
    except KeyboardInterrupt:
        pass
    finally:
        logger.info("healthmon stopped")


if __name__ == "__main__":
    main()
