import argparse
import logging
import sys
from typing import Optional, Sequence

from app_config import (
    AppConfigurationError,
    load_app_config,
    load_secret_config,
    resolve_config_path,
)
from calendar_client import CalendarConfig, CalendarError, GoogleCalendar
from llm import LLMConfig, LLMError, OracleRequestBuilder, SuggestionParser, build_oracle_backend
from policy import PolicyError, load_policy
from scheduler import ActionReconciler, PipelineStageError, SchedulingPipeline


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("calendar_planner")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Turn a scheduling policy into calendar changes."
    )
    parser.add_argument("--config", help="Path to config.toml (default: APP_CONFIG_FILE or ./config.toml)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print recommendations without writing to the calendar.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one planning pass and print the report."""
    args = parse_args(argv)
    logger = setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    # Configuration errors abort before any external call.
    try:
        config_path = resolve_config_path(args.config)
        app_config = load_app_config(str(config_path))
        secret_config = load_secret_config(backend=app_config.llm.backend)
        logger.info("Loaded runtime config: %s", config_path)
        policy = load_policy(app_config.policy.file, logger=logging.getLogger("policy"))
        calendar_config = CalendarConfig.from_settings(
            app_config.calendar,
            calendar_id=secret_config.google_calendar_id,
            service_account_file=secret_config.google_service_account_file,
        )
        llm_config = LLMConfig.from_settings(
            app_config.llm,
            api_key=secret_config.anthropic_api_key,
        )
    except (AppConfigurationError, PolicyError, CalendarError, LLMError) as error:
        logger.error(f"Configuration error: {error}")
        return 1

    try:
        calendar = GoogleCalendar(
            calendar_id=calendar_config.calendar_id,
            service_account_file=calendar_config.service_account_file,
            page_size=calendar_config.page_size,
            logger=logging.getLogger("calendar"),
        )
        oracle = build_oracle_backend(llm_config, logger=logging.getLogger("llm"))
    except (CalendarError, LLMError) as error:
        logger.error(f"Initialization error: {error}")
        return 1

    builder = OracleRequestBuilder(lookahead_days=calendar_config.lookahead_days)
    pipeline = SchedulingPipeline(
        policy,
        calendar,
        oracle,
        ActionReconciler(
            calendar,
            origin=app_config.run.origin,
            dry_run=args.dry_run or app_config.run.dry_run,
            logger=logging.getLogger("scheduler.reconciler"),
        ),
        builder=builder,
        parser=SuggestionParser(
            prefix=builder.response_prefix,
            shape=builder.response_shape,
            logger=logging.getLogger("llm.parser"),
        ),
        lookback_days=calendar_config.lookback_days,
        lookahead_days=calendar_config.lookahead_days,
        logger=logging.getLogger("scheduler"),
    )

    try:
        report = pipeline.run()
    except PipelineStageError as error:
        logger.error(f"Run aborted in {error.stage} stage: {error.cause}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.\n")
        return 130

    print("\nScheduling Suggestions:\n")
    print(report.format())
    return 2 if report.has_failures else 0


if __name__ == "__main__":
    sys.exit(main())
