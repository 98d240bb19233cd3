from __future__ import annotations

import json
import logging
import signal
from datetime import UTC, datetime, timedelta
from pathlib import Path
from threading import Event

import click

from charge_finder.config import load_app_config
from charge_finder.errors import ChargeFinderError
from charge_finder.lib.home_control import HomeControlClient
from charge_finder.models.config import AppConfig
from charge_finder.worker import FindChargingRangesJob, Worker

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _common_options(func: click.Command) -> click.Command:
    func = click.option(
        "--config",
        type=click.Path(path_type=Path, dir_okay=False),
        default=Path("config.yaml"),
        show_default=True,
        help="Path to YAML config.",
    )(func)
    func = click.option(
        "--log-level",
        type=click.Choice(LOG_LEVELS, case_sensitive=False),
        default="INFO",
        show_default=True,
        help="Logging level.",
    )(func)
    return func


@click.group(context_settings={"help_option_names": ["-h", "--help"]}, invoke_without_command=True)
@_common_options
@click.pass_context
def cli(ctx: click.Context, config: Path, log_level: str) -> int | None:
    if ctx.invoked_subcommand:
        ctx.ensure_object(dict)
        ctx.obj["config"] = config
        ctx.obj["log_level"] = log_level
        return None

    _configure_logging(log_level)
    app_config = _load_config(config)

    job = _build_job(app_config, dry_run=False)
    worker = Worker(
        jobs=[job],
        poll_interval_seconds=app_config.worker.poll_interval_seconds,
    )
    shutdown_event = Event()

    def _handle_signal(signum: int, _frame: object) -> None:
        logging.info("Received signal %s, shutting down", signum)
        shutdown_event.set()

    signal.signal(signal.SIGTERM, _handle_signal)
    signal.signal(signal.SIGINT, _handle_signal)

    worker.run_forever(shutdown_event)
    return 0


@cli.command()
@click.option("--dry-run/--no-dry-run", default=False, help="Find ranges without creating them.")
@click.pass_context
def find(ctx: click.Context, dry_run: bool) -> None:
    """Run the charge finder once, ignoring the job throttle."""
    ctx.ensure_object(dict)
    _configure_logging(ctx.obj["log_level"])
    app_config = _load_config(ctx.obj["config"])

    job = _build_job(app_config, dry_run=dry_run)
    try:
        result = job.run(datetime.now(UTC))
    except ChargeFinderError as exc:
        raise click.ClickException(str(exc)) from exc

    if dry_run:
        payload = [
            {"startsAt": span[0].isoformat(), "endsAt": span[1].isoformat()}
            for group in result.clipped_groups
            if (span := group.span) is not None
        ]
    else:
        payload = [
            stored.model_dump(mode="json", by_alias=True) for stored in result.created_ranges
        ]
    click.echo(json.dumps(payload, indent=2))


def _load_config(config_path: Path) -> AppConfig:
    try:
        return load_app_config(config_path)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


def _build_job(app_config: AppConfig, *, dry_run: bool) -> FindChargingRangesJob:
    client = HomeControlClient(config=app_config.home_control)
    return FindChargingRangesJob(
        client=client,
        max_age=timedelta(minutes=app_config.worker.find_charging_ranges_max_age_minutes),
        dry_run=dry_run,
        display_tz=app_config.display_tz(),
    )


def _parse_log_level(level_str: str) -> int:
    normalized = level_str.strip().upper()
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    if normalized in mapping:
        return mapping[normalized]
    raise ValueError(f"Invalid log level: {level_str}")


def _configure_logging(level_str: str) -> None:
    log_level = _parse_log_level(level_str)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger("charge_finder").setLevel(log_level)


if __name__ == "__main__":
    cli()
