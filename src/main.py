#!/usr/bin/env python3
"""
Main entry point for the GitLab CI provider CLI.
"""

import argparse
import sys
from gitlab_ci_provider.exceptions import CIProviderError
from gitlab_ci_provider.provider import GitLabCIProvider
from gitlab_ci_provider.state.ci_state import CIState, RepositoryAttributes, VariableState
from gitlab_ci_provider.utils import get_env_var, parse_assignments
from config.settings import GITLAB_TOKEN_ENV_VAR, GITLAB_URL_CONFIG_KEY


def build_parser():
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(description="GitLab CI Provider Utility")
    parser.add_argument(
        "action",
        choices=["configure", "add-key", "badge", "url", "infer"],
        help="Action to perform"
    )
    parser.add_argument(
        "--project-id",
        help="GitLab project path or numeric id"
    )
    parser.add_argument(
        "--gitlab-url",
        default=None,
        help="GitLab host for self-hosted instances (default: gitlab.com)"
    )
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="CI variable to set, may be repeated"
    )
    parser.add_argument(
        "--key-file",
        help="Private key file to store as SSH_PRIVATE_KEY"
    )
    parser.add_argument(
        "--remote-url",
        help="Repository URL to test with the infer action"
    )
    return parser


def run(args) -> int:
    """Run one action and return the process exit code."""
    config = {GITLAB_URL_CONFIG_KEY: args.gitlab_url} if args.gitlab_url else {}
    provider = GitLabCIProvider(config=config)

    if args.action == "infer":
        if not args.remote_url:
            provider.logger.error("--remote-url is required for infer")
            return 1
        return 0 if provider.infer(args.remote_url) else 1

    if not args.project_id:
        provider.logger.error(f"--project-id is required for {args.action}")
        return 1

    ci_env = CIState(states={
        "repository": RepositoryAttributes(project=args.project_id),
        "variables": VariableState(variables=parse_assignments(args.var)),
    })

    if args.action == "url":
        print(provider.project_url(ci_env))
        return 0

    if args.action == "badge":
        print(provider.badge(ci_env))
        return 0

    try:
        provider.set_credentials({provider.GITLAB_TOKEN: get_env_var(GITLAB_TOKEN_ENV_VAR)})

        if args.action == "configure":
            provider.configure_server(ci_env)
            provider.start_testing(ci_env)

        elif args.action == "add-key":
            if not args.key_file:
                provider.logger.error("--key-file is required for add-key")
                return 1
            provider.add_private_key(ci_env, args.key_file)

    except CIProviderError as e:
        provider.logger.error(f"[ERROR] {e}")
        return 1

    except OSError as e:
        provider.logger.error(f"[ERROR] Cannot read key file: {e}")
        return 1

    return 0


def main():
    """Main entry point for the CLI."""
    args = build_parser().parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    main()
