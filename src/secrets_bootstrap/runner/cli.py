"""Command-line interface for bootstrapping secrets."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import TextIO

from secrets_bootstrap import __version__
from secrets_bootstrap.core.audit.filters import SecretRedactor
from secrets_bootstrap.core.audit.sinks import AuditSink, CompositeAuditSink, FileAuditSink, LoggingAuditSink
from secrets_bootstrap.core.config.base import LogLevel, OutputMode
from secrets_bootstrap.core.config.loader import load_from_file
from secrets_bootstrap.core.config.secrets import SecretsManagerConfig
from secrets_bootstrap.core.errors import ConfigurationError
from secrets_bootstrap.core.output.environment import ProcessEnvironment
from secrets_bootstrap.core.secrets.providers import AwsSecretsBackend
from secrets_bootstrap.core.utils import mask_secret
from secrets_bootstrap.runner.aggregator import SecretAggregator
from secrets_bootstrap.runner.result import AggregationResult, RunStatus

logger = logging.getLogger(__name__)


def _output_mode(value: str) -> OutputMode:
    try:
        return OutputMode(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid output mode '{value}' (choose env, file or both)") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secrets-bootstrap",
        description=(
            "Resolve AWS Secrets Manager references in devcontainer and .env "
            "templates, then export them as environment variables and/or a .env file."
        ),
    )
    parser.add_argument("--config", help="Path to an optional HOCON configuration file.")
    parser.add_argument("-s", "--secret-name", help="Name of the primary secret bundle to fetch.")
    parser.add_argument("-r", "--region", help="AWS region (default: AWS_DEFAULT_REGION, AWS_REGION, us-east-1).")
    parser.add_argument(
        "-o",
        "--output-mode",
        type=_output_mode,
        help="Where to deliver secrets: env, file or both (default: both).",
    )
    parser.add_argument("-e", "--env-file", help="Path of the generated .env file (default: .env).")
    parser.add_argument("-x", "--env-example", help="Path of the .env template (default: .env.example).")
    parser.add_argument(
        "-d",
        "--devcontainer",
        help="Path of the devcontainer descriptor (default: .devcontainer/devcontainer.json).",
    )
    parser.add_argument("--access-key", help="Explicit AWS access key ID.")
    parser.add_argument("--secret-key", help="Explicit AWS secret access key.")
    parser.add_argument("--endpoint-url", help="Custom Secrets Manager endpoint, e.g. LocalStack.")
    parser.add_argument("--timeout", type=float, help="Per-call timeout in seconds (default: 10).")
    parser.add_argument(
        "--quiet",
        action="store_true",
        default=False,
        help="Suppress the summary and informational logging.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="List the references that would be resolved without fetching or writing anything.",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        default=None,
        help="Set the logging level (default: INFO, WARNING with --quiet).",
    )
    parser.add_argument("--audit-file", help="Append JSON-lines audit events to this file.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_config(args: argparse.Namespace, environ: Mapping[str, str] | None = None) -> SecretsManagerConfig:
    """Layer defaults, the config file, environment variables and CLI flags.

    Raises:
        ConfigurationError: The config file is missing or invalid, or the
            resulting AWS settings fail validation.
    """
    if args.config:
        if not Path(args.config).is_file():
            raise ConfigurationError(f"Config file not found: {args.config}")
        try:
            config = load_from_file(args.config, SecretsManagerConfig)
        except Exception as exc:
            raise ConfigurationError(f"Invalid config file {args.config}: {exc}") from exc
    else:
        config = SecretsManagerConfig()

    overrides: dict[str, object] = {}
    for flag, attr in (
        ("secret_name", "secret_name"),
        ("output_mode", "output_mode"),
        ("env_file", "env_file_path"),
        ("env_example", "env_example_path"),
        ("devcontainer", "devcontainer_path"),
    ):
        value = getattr(args, flag)
        if value:
            overrides[attr] = value

    aws_overrides: dict[str, object] = {}
    for flag, attr in (
        ("region", "region"),
        ("access_key", "access_key"),
        ("secret_key", "secret_key"),
        ("endpoint_url", "endpoint_url"),
        ("timeout", "timeout_seconds"),
    ):
        value = getattr(args, flag)
        if value:
            aws_overrides[attr] = value

    try:
        config = config.with_environment_overrides(environ)
        aws = replace(config.aws, **aws_overrides)  # type: ignore[arg-type]
        config = replace(config, aws=aws, **overrides)  # type: ignore[arg-type]
        config.aws.validate()
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
    return config


def _build_audit_sink(audit_file: str | None) -> AuditSink:
    if audit_file:
        return CompositeAuditSink(LoggingAuditSink(), FileAuditSink(audit_file))
    return LoggingAuditSink()


def print_summary(result: AggregationResult, config: SecretsManagerConfig, out: TextIO) -> None:
    """Print a masked, human-readable summary of *result*."""
    if result.dry_run:
        print(f"[DRY RUN] Would fetch secret: {config.secret_name} from region: {config.aws.region}", file=out)
        for source, references in result.planned_references.items():
            for key, ref in references.items():
                print(f"[DRY RUN] Would resolve {key} from {ref.arn} ({source})", file=out)
        if config.output_mode.sets_environment:
            for key in result.merged:
                print(f"[DRY RUN] Would set environment variable: {key}", file=out)
        if config.output_mode.writes_file and result.merged:
            print(f"[DRY RUN] Would write .env file to: {config.env_file_path}", file=out)
        return

    if result.bundle is not None:
        print("Retrieved Application Secrets:", file=out)
        for key, value in SecretRedactor().redact(result.bundle).items():
            print(f"  {key}: {value}", file=out)

    if result.env_vars_set:
        print("\nEnvironment Variables Set:", file=out)
        for key in result.env_vars_set:
            print(f"  {key}: {mask_secret(result.merged.get(key))}", file=out)

    if result.env_file is not None:
        print(f"\n.env file written to: {result.env_file}", file=out)


def _print_problems(result: AggregationResult, err: TextIO) -> None:
    for failure in result.unresolved:
        print(f"Unresolved: {failure.key} ({failure.status.value}): {failure.error}", file=err)
    for key, reason in result.rejected_env_vars.items():
        print(f"Rejected environment variable: {key!r}: {reason}", file=err)
    if result.output_error is not None:
        print(f"Error: {result.output_error}", file=err)
    if result.bundle_error is not None:
        print(f"Error: {result.bundle_error}", file=err)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint.

    Args:
        argv: Command-line arguments. Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: 0 for success, 1 for failure, 2 when some references
        were left unresolved.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    level = args.log_level or (LogLevel.WARNING.value if args.quiet else LogLevel.INFO.value)
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    audit_sink = _build_audit_sink(args.audit_file)
    try:
        aggregator = SecretAggregator(
            AwsSecretsBackend(config.aws),
            config,
            environment=ProcessEnvironment(),
            audit_sink=audit_sink,
        )
        result = aggregator.run(dry_run=args.dry_run)
    except Exception as exc:
        logger.error("Run failed: %s", exc, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        audit_sink.close()

    if not args.quiet:
        print_summary(result, config, sys.stdout)
    _print_problems(result, sys.stderr)

    if result.status is RunStatus.SUCCESS:
        return 0
    elif result.status is RunStatus.PARTIAL_SUCCESS:
        return 2
    else:
        return 1


if __name__ == "__main__":
    sys.exit(main())
