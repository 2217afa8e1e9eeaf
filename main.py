"""Entry point: ``python main.py`` starts long polling for the configured bot."""

from bot.dispatcher import run
from core.logger import SDKLogger

logger = SDKLogger.get_logger()


def main() -> None:
    try:
        run()
    except KeyboardInterrupt:
        logger.info("Polling stopped by user")
    finally:
        SDKLogger.cleanup()


if __name__ == "__main__":
    main()
