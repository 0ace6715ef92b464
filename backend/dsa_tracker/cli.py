# cli.py
import argparse
import asyncio
import json
import sys

from .config import settings
from .logging_config import configure_logging
from .services.platform_service import PlatformService


def main(argv=None):
    parser = argparse.ArgumentParser(prog="dsa-tracker")
    parser.add_argument("--mode", choices=["fetch", "capabilities"], required=True)
    parser.add_argument("--platform", help="leetcode, codeforces, codechef or geeksforgeeks")
    parser.add_argument("--username", help="handle on the platform (fetch mode)")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    service = PlatformService()

    if args.mode == "capabilities":
        print(json.dumps(service.capabilities(), indent=2))
    elif args.mode == "fetch":
        if not args.platform or not args.username:
            raise SystemExit("Provide --platform and --username")
        stats = asyncio.run(service.fetch_user_data(args.platform, args.username))
        if stats is None:
            print(f"No data for {args.username} on {args.platform}", file=sys.stderr)
            return 1
        print(json.dumps(stats.to_record(), indent=2))
    return 0

if __name__ == "__main__":
    sys.exit(main())
