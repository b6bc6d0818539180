"""
Command-line entrypoint: dump Airtable records as JSON.

- Parses CLI args (env fallbacks) and loads credentials
- Builds an httpx.AsyncClient and a Client around it
- `get TABLE ID` prints one record envelope, `list TABLE` prints all of them

Request errors exit with 2, other client errors with 1.
"""
from __future__ import annotations
import asyncio, json, sys
from dataclasses import asdict, dataclass
from typing import List, Optional, Sequence

import httpx

from .config import load_credentials, parse_args
from .errors import AirtableError, RequestError
from .http_client import Client
from .query import Query


@dataclass
class _Untyped:
    """Empty shape: the CLI prints envelopes and never maps fields."""


def build_query(args) -> Query:
    q = Query().fields(*args.fields)
    if getattr(args, "view", None):
        q.view(args.view)
    if getattr(args, "formula", None):
        q.filter_by_formula(args.formula)
    if getattr(args, "max_records", None):
        q.max_records(args.max_records)
    return q


async def run(args) -> List[dict]:
    creds = load_credentials(args.secrets)
    async with Client(
        api_key=creds.api_key,
        base_id=creds.base_id,
        http=httpx.AsyncClient(timeout=httpx.Timeout(args.timeout)),
        version=args.version_segment,
        root_url=args.root_url,
        no_limit=args.no_limit,
    ) as client:
        query = build_query(args)
        resource = client.table(args.table, _Untyped)
        if args.command == "get":
            records = [await resource.fetch(args.record_id, query)]
        else:
            records = await resource.list_records(query, follow_offset=not args.single_page)
    return [asdict(r) for r in records]


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    try:
        out = asyncio.run(run(args))
    except RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        sys.exit(2)
    except AirtableError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("Aborted.", file=sys.stderr)
        sys.exit(130)
    json.dump(out if args.command == "list" else out[0], sys.stdout, indent=2)
    sys.stdout.write("\n")
