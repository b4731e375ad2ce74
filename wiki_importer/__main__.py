"""Start-up entry point: imports WIKI_IMPORT_PATH when WIKI_IMPORT_ENABLED is set."""

import sys

from wiki_importer import __version__
from wiki_importer.cli.utils import database_session
from wiki_importer.ingestion.batch_writer import KeyCorrelation
from wiki_importer.ingestion.pipeline import DumpImportPipeline
from wiki_importer.utils.config import Config, ConfigurationError
from wiki_importer.utils.exceptions import WikiImporterError
from wiki_importer.utils.logger import configure_logging, get_logger


def main() -> int:
    """Main application entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        config = Config()

        configure_logging(config.log_level, config.log_format)
        logger = get_logger(__name__)

        logger.info("application_starting", version=__version__)

        if not config.import_enabled:
            logger.info("wiki_import_disabled", hint="set WIKI_IMPORT_ENABLED=true to import")
            return 0

        if not config.import_paths:
            raise ConfigurationError("WIKI_IMPORT_PATH must list at least one dump file")

        logger.info("wiki_import_requested", files=config.import_paths)

        with database_session(config.database_url) as session:
            pipeline = DumpImportPipeline(
                session,
                batch_size=config.batch_size,
                key_correlation=KeyCorrelation(config.key_correlation),
                user_count=config.user_count,
                random_seed=config.random_seed,
            )
            stats = pipeline.import_dumps(config.import_paths)

        logger.info("application_finished", **stats.to_dict())
        return 0

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        print(
            "Please check your .env file and ensure all required variables are set.",
            file=sys.stderr,
        )
        return 1
    except WikiImporterError as e:
        print(f"Import failed: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
