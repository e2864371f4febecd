"""Main entry point for queuecast."""

import logging
import sys

from .config.cli_config import CLIConfigManager
from .core.logging import setup_logging, get_logger
from .core.application import Application


def main() -> int:
    """Main entry point for the CLI."""
    try:
        cli_manager = CLIConfigManager()
        args = cli_manager.parse_args()

        # Set up logging early; the application reconfigures it once settings are loaded
        setup_logging(level=args.log_level or "INFO", format_type=args.log_format or "standard")
        logger = get_logger(__name__)
        logger.debug("Starting queuecast")

        app = Application()
        return app.run(args)

    except KeyboardInterrupt:
        get_logger(__name__).info("Interrupted by user")
        return 130
    except Exception as e:
        if not logging.getLogger().handlers:
            setup_logging()
        get_logger(__name__).error(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
