#!/usr/bin/env python3
"""Deployment script for the default log retention CDK application."""

import argparse
import os
import shlex
import subprocess
import sys
from typing import List, Mapping, Optional, Sequence

from infrastructure.config.environments import get_environment_config


def run_command(
    command: Sequence[str], *, check: bool = True, env: Optional[Mapping[str, str]] = None
) -> subprocess.CompletedProcess[str]:
    """Execute a subprocess without shell interpolation."""

    printable = " ".join(shlex.quote(part) for part in command)
    print(f"Running: {printable}")

    result = subprocess.run(command, capture_output=True, text=True, env=env, check=False)

    if check and result.returncode != 0:
        print(f"Command failed with return code {result.returncode}")
        if result.stdout:
            print(f"stdout: {result.stdout}")
        if result.stderr:
            print(f"stderr: {result.stderr}")
        sys.exit(result.returncode)

    return result


def build_cdk_command(action: str, environment: str, stacks: Optional[str] = None) -> List[str]:
    command = ["cdk", action]
    if stacks:
        command.extend(shlex.split(stacks))
    else:
        command.append("--all")
    command.extend(["--context", f"environment={environment}"])
    if action == "deploy":
        command.extend(["--require-approval", "never"])
    return command


def deploy_stacks(environment: str, stacks: Optional[str] = None, *, diff_only: bool = False) -> None:
    """Deploy (or diff) CDK stacks for the specified environment."""
    config = get_environment_config(environment)
    region = str(config.get("region", "ap-northeast-2"))
    print(f"Target environment: {environment} ({region})")

    exec_env = {**os.environ, "CDK_DEFAULT_REGION": region}

    if diff_only:
        result = run_command(build_cdk_command("diff", environment, stacks), check=False, env=exec_env)
        print(result.stdout)
        return

    # Bootstrap CDK if needed
    print("Checking CDK bootstrap status...")
    run_command(
        ["cdk", "bootstrap", "--context", f"environment={environment}"],
        check=False,
        env=exec_env,
    )

    run_command(build_cdk_command("deploy", environment, stacks), env=exec_env)
    print(f"Deployment to {environment} completed successfully!")


def main():
    """Main deployment function."""
    parser = argparse.ArgumentParser(description="Deploy default log retention CDK stacks")
    parser.add_argument(
        "--environment", "-e", choices=["dev", "staging", "prod"], default="dev", help="Target environment"
    )
    parser.add_argument("--stacks", "-s", help="Specific stacks to deploy (space-separated)")
    parser.add_argument("--diff", action="store_true", help="Show the pending changes instead of deploying")
    parser.add_argument("--skip-install", action="store_true", help="Do not reinstall Python dependencies")

    args = parser.parse_args()

    if not args.skip_install:
        print("Installing Python dependencies...")
        run_command([sys.executable, "-m", "pip", "install", "-e", ".[infra]"])

    deploy_stacks(args.environment, args.stacks, diff_only=args.diff)


if __name__ == "__main__":
    main()
