"""Local demo: bootstrap secrets without AWS.

Builds a throwaway project directory with a devcontainer descriptor and
a ``.env.example`` template, resolves their references against an
in-memory backend, and prints what was written. No AWS account or
network access required.

Usage:
    python examples/run_local_demo.py
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

from secrets_bootstrap.core.audit import LoggingAuditSink
from secrets_bootstrap.core.config import OutputMode, load_from_file
from secrets_bootstrap.core.config.secrets import SecretsManagerConfig
from secrets_bootstrap.core.output import InMemoryEnvironment
from secrets_bootstrap.core.secrets import StaticSecretsBackend
from secrets_bootstrap.runner import AggregationResult, SecretAggregator

ARN_PREFIX = "arn:aws:secretsmanager:us-east-1:123456789012:secret:"

DEMO_SECRETS = {
    "dotnet-app-secrets": json.dumps(
        {
            "DatabaseUrl": "postgres://app:pw@db:5432/app",
            "ApiKey": "sk-demo-1234567890",
            "JwtSecret": "jwt-demo-secret",
            "RedisUrl": "redis://cache:6379",
        }
    ),
    "github-token-a1b2c3": "ghp_demo_token",
    "db-password-d4e5f6": "correct horse battery staple",
}


def write_project(root: Path) -> None:
    """Create the demo devcontainer descriptor and env template under *root*."""
    devcontainer = root / ".devcontainer"
    devcontainer.mkdir(parents=True, exist_ok=True)
    (devcontainer / "devcontainer.json").write_text(
        "// demo devcontainer\n"
        + json.dumps(
            {
                "name": "demo",
                "containerEnv": {"GITHUB_TOKEN": "${" + ARN_PREFIX + "github-token-a1b2c3}"},
                "remoteEnv": {"LOG_LEVEL": "debug"},
            },
            indent=2,
        )
    )
    (root / ".env.example").write_text(
        "# demo template\n"
        f"DB_PASSWORD=${{{ARN_PREFIX}db-password-d4e5f6}}\n"
        f"MISSING_SECRET=${{{ARN_PREFIX}not-there}}\n"
        "APP_ENV=development\n"
    )


def main(root: Path | None = None) -> AggregationResult:
    """Run the demo in *root* (a fresh temporary directory by default)."""
    workdir = root or Path(tempfile.mkdtemp(prefix="secrets-bootstrap-demo-"))
    write_project(workdir)

    config_path = str(Path(__file__).parent / "secrets-bootstrap.conf")
    config: SecretsManagerConfig = load_from_file(config_path, SecretsManagerConfig)
    config.output_mode = OutputMode.BOTH
    config.env_file_path = str(workdir / ".env")
    config.env_example_path = str(workdir / ".env.example")
    config.devcontainer_path = str(workdir / ".devcontainer" / "devcontainer.json")

    environment = InMemoryEnvironment()
    aggregator = SecretAggregator(
        StaticSecretsBackend(DEMO_SECRETS),
        config,
        environment=environment,
        audit_sink=LoggingAuditSink(),
    )
    result = aggregator.run()

    print(f"Status   : {result.status.value}")
    print(f"Resolved : {result.resolved_count}")
    for failure in result.unresolved:
        print(f"Unresolved: {failure.key} ({failure.status.value})")
    print(f"Variables: {', '.join(sorted(environment.variables))}")
    if result.env_file is not None:
        print(f"\n{result.env_file}:")
        print(result.env_file.read_text())
    return result


if __name__ == "__main__":
    main()
