#!/usr/bin/env python
"""List the users of a Stardog server.

Examples:
  python scripts/list_users.py
  python scripts/list_users.py --url http://127.0.0.1:5820/ --user admin --password admin --timeout 10

Connection settings default to STARDOG_URL, STARDOG_USERNAME, STARDOG_PASSWORD
(read from the environment or a local .env file).
"""
from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path


# Loads a local .env if present, without overriding variables already set
def _load_env_file(env_path: Path) -> None:
    if not env_path.exists():
        return
    for line in env_path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip(); v = v.strip().strip('"').strip("'")
        existing = os.environ.get(k)
        if existing is None or existing.strip() == '':
            os.environ[k] = v


_load_env_file(Path('.env'))

from stardog_admin import CallContext, Client, StardogError


def parse_args():
    p = argparse.ArgumentParser(description='List Stardog users')
    p.add_argument('--url', help='Base URL, e.g. http://127.0.0.1:5820/')
    p.add_argument('--user')
    p.add_argument('--password')
    p.add_argument('--timeout', type=float, default=30.0, help='Overall call timeout in seconds')
    p.add_argument('--verbose', action='store_true')
    return p.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='[%(levelname)s] %(message)s')
    try:
        client = Client.from_env()
        if args.url:
            client = Client(client.session, args.url, user_agent=client.user_agent,
                            auth=client.auth, timeout=client.timeout)
        if args.user:
            client.set_basic_auth(args.user, args.password or '')
        users, _ = client.users.list(CallContext.with_timeout(args.timeout))
    except StardogError as e:
        print(f'Error listing users: {e}', file=sys.stderr)
        return 1
    for name in users.users:
        print(name)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
