"""Operator utilities for the directory API.

Subcommands:
    issue-token   Print a bearer token for a user with a registered session
    verify-audit  Check the HMAC signatures of the directory audit log

Tokens are signed with FLASK_SECRET_KEY, so the same key must be configured
for this script and for the running service. issue-token refuses to run when
no key is configured, even with DEMO_MODE=true: the key generated for this
process would not match the one generated by the service.
"""
from __future__ import annotations
import argparse
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from directory_api.api.auth import issue_token
from directory_api.config import load_settings
from directory_api.core.audit import verify_audit_log


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Directory API helper")
    sub = parser.add_subparsers(dest="cmd")

    tok = sub.add_parser("issue-token",
                         help="Print a bearer token (requires FLASK_SECRET_KEY)")
    tok.add_argument("--username", required=True)
    tok.add_argument("--lifetime", type=int, default=None,
                     help="Token lifetime in seconds (default: TOKEN_LIFETIME_SECONDS)")

    ver = sub.add_parser("verify-audit")
    ver.add_argument("--log-file", type=Path, default=None,
                     help="Audit log to verify (default: configured audit log)")

    args = parser.parse_args(argv)
    if not args.cmd:
        parser.print_help()
        return 2

    cfg = load_settings()

    if args.cmd == "issue-token":
        if cfg.secret_key_generated:
            print("FLASK_SECRET_KEY is not set; a generated key would not be accepted "
                  "by the service. Set FLASK_SECRET_KEY to the service's key.", file=sys.stderr)
            return 1
        lifetime = args.lifetime or cfg.token_lifetime_seconds
        print(issue_token(args.username, cfg.secret_key, lifetime))
        return 0

    log_file = args.log_file or cfg.audit_log_file
    total, valid = verify_audit_log(log_file, cfg.audit_log_signing_key)
    print(f"Audit log: {valid}/{total} events with valid signatures")
    return 0 if total == valid else 1


if __name__ == "__main__":
    sys.exit(main())
