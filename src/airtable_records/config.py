from __future__ import annotations
import argparse, json, os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from .errors import SetupError

DEFAULT_ROOT_URL = "https://api.airtable.com"
DEFAULT_VERSION = "v0"
DEFAULT_RATE = 5.0  # requests per second
DEFAULT_SECRETS = "secrets.env"

NO_LIMIT_ENV = "AIRTABLE_NO_LIMIT"
API_KEY_ENV = "AIRTABLE_API_KEY"
BASE_ID_ENV = "AIRTABLE_BASE_ID"


def rate_limit_disabled(env: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if env is None else env
    return bool(env.get(NO_LIMIT_ENV, ""))


@dataclass(frozen=True)
class Credentials:
    api_key: str
    base_id: str


def load_credentials(path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Credentials:
    """
    Read `{"APIKey": ..., "BaseID": ...}` from a JSON secrets file.
    Falls back to AIRTABLE_API_KEY / AIRTABLE_BASE_ID when the file is absent.
    """
    env = os.environ if env is None else env
    path = path or DEFAULT_SECRETS
    data: dict = {}
    if os.path.exists(path):
        try:
            with open(path, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            raise SetupError(f"could not decode {path}: {e}") from e
        if not isinstance(data, dict):
            raise SetupError(f"could not decode {path}: expected a JSON object")

    api_key = data.get("APIKey") or env.get(API_KEY_ENV, "")
    base_id = data.get("BaseID") or env.get(BASE_ID_ENV, "")
    if not api_key:
        raise SetupError(f"missing APIKey (set it in {path} or {API_KEY_ENV})")
    if not base_id:
        raise SetupError(f"missing BaseID (set it in {path} or {BASE_ID_ENV})")
    return Credentials(api_key=api_key, base_id=base_id)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="airtable-records", description="Fetch Airtable records as JSON")
    p.add_argument("--root-url", default=os.getenv("AIRTABLE_ROOT_URL", DEFAULT_ROOT_URL))
    p.add_argument("--version-segment", default=os.getenv("AIRTABLE_VERSION", DEFAULT_VERSION))
    p.add_argument("--secrets", default=os.getenv("AIRTABLE_SECRETS", DEFAULT_SECRETS))
    p.add_argument("--timeout", type=float, default=float(os.getenv("AIRTABLE_TIMEOUT", "30")))
    p.add_argument("--no-limit", action="store_true", default=rate_limit_disabled())

    sub = p.add_subparsers(dest="command", required=True)

    get = sub.add_parser("get", help="fetch one record")
    get.add_argument("table")
    get.add_argument("record_id")
    get.add_argument("--field", dest="fields", action="append", default=[])

    ls = sub.add_parser("list", help="list records, following offsets")
    ls.add_argument("table")
    ls.add_argument("--field", dest="fields", action="append", default=[])
    ls.add_argument("--view")
    ls.add_argument("--formula")
    ls.add_argument("--max-records", type=int)
    ls.add_argument("--single-page", action="store_true")
    return p


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
