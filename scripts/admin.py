"""Admin CLI for weather automation callers and their saved requests.

Usage examples:
    python scripts/admin.py create --email user@example.com --label "kiosk"
    python scripts/admin.py list
    python scripts/admin.py revoke --prefix abcd1234 --yes
    python scripts/admin.py requests --requester 3 --json
"""

from __future__ import annotations

import argparse
import json
from datetime import datetime, timedelta
import sys

from app.config import settings
from app.db import SessionLocal, init_db
from app.db_models import ApiKey
from app.repositories import WeatherRequestRepository
from app.security.api_keys import DEFAULT_KEY_PREFIX, generate_api_key, hash_api_key, key_prefix


def _get_session():
    init_db()
    return SessionLocal()


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _emit(rows: list[dict], as_json: bool, empty_message: str) -> None:
    if not rows:
        print(empty_message)
    elif as_json:
        print(json.dumps(rows, indent=2))
    else:
        for row in rows:
            print("  ".join(f"{key}={value if value is not None else 'n/a'}" for key, value in row.items()))


def cmd_create(args) -> None:
    if not settings.api_key_pepper:
        sys.stderr.write("API_KEY_PEPPER must be configured to issue API keys.\n")
        raise SystemExit(1)

    expires_at = None
    if args.expires_in:
        expires_at = datetime.utcnow() + timedelta(days=args.expires_in)

    session = _get_session()
    try:
        plaintext_key = generate_api_key(
            prefix=f"sk_test_{DEFAULT_KEY_PREFIX[3:]}" if args.test else DEFAULT_KEY_PREFIX
        )
        api_key = ApiKey(
            key_prefix=key_prefix(plaintext_key),
            key_hash=hash_api_key(plaintext_key, settings.api_key_pepper),
            holder_email=args.email,
            holder_label=args.label,
            created_at=datetime.utcnow(),
            expires_at=expires_at,
            notes=args.notes,
        )
        session.add(api_key)
        session.commit()
        session.refresh(api_key)

        print("API key created (it will not be shown again):")
        print(f"  requester_id: {api_key.id}")
        print(f"  holder: {api_key.holder_email} ({api_key.holder_label or 'n/a'})")
        print(f"  api_key: {plaintext_key}")
    finally:
        session.close()


def cmd_list(args) -> None:
    session = _get_session()
    try:
        query = session.query(ApiKey)
        if not args.show_revoked:
            query = query.filter(ApiKey.revoked_at.is_(None))
        rows = [
            {
                "requester_id": key.id,
                "prefix": key.key_prefix,
                "email": key.holder_email,
                "label": key.holder_label,
                "expires_at": _iso(key.expires_at),
                "last_used_at": _iso(key.last_used_at),
                "revoked_at": _iso(key.revoked_at),
            }
            for key in query.order_by(ApiKey.created_at.desc()).all()
        ]
        _emit(rows, args.json, "No API keys found.")
    finally:
        session.close()


def cmd_revoke(args) -> None:
    session = _get_session()
    try:
        target = session.query(ApiKey).filter_by(key_prefix=args.prefix).first()
        if not target:
            sys.stderr.write("API key not found.\n")
            raise SystemExit(1)

        if target.revoked_at is not None:
            print("API key is already revoked.")
            return

        if not args.yes:
            answer = input(f"Revoke API key {target.key_prefix} for {target.holder_email}? [y/N]: ")
            if answer.strip().lower() not in {"y", "yes"}:
                print("Cancelled.")
                return

        target.revoked_at = datetime.utcnow()
        session.commit()
        print(f"API key {target.key_prefix} revoked at {target.revoked_at.isoformat()}")
    finally:
        session.close()


def cmd_requests(args) -> None:
    session = _get_session()
    try:
        records = WeatherRequestRepository(session).list_for_requester(args.requester, limit=args.limit)
        rows = [
            {
                "id": record.id,
                "city": record.city,
                "email": record.email,
                "temperature": record.temperature,
                "condition": record.condition,
                "air_quality": record.air_quality_label,
                "created_at": _iso(record.created_at),
            }
            for record in records
        ]
        _emit(rows, args.json, "No weather requests found.")
    finally:
        session.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage weather automation callers")
    sub = parser.add_subparsers(dest="command", required=True)

    create_cmd = sub.add_parser("create", help="Issue an API key for a caller")
    create_cmd.add_argument("--email", required=True, help="Email address of the caller")
    create_cmd.add_argument("--label", help="Label or device name")
    create_cmd.add_argument("--expires-in", type=int, help="Expiration in days")
    create_cmd.add_argument("--notes", help="Optional notes for the key")
    create_cmd.add_argument("--test", action="store_true", help="Generate a test-only key")
    create_cmd.set_defaults(func=cmd_create)

    list_cmd = sub.add_parser("list", help="List API keys")
    list_cmd.add_argument("--show-revoked", action="store_true", help="Include revoked keys")
    list_cmd.add_argument("--json", action="store_true", help="Return JSON output")
    list_cmd.set_defaults(func=cmd_list)

    revoke_cmd = sub.add_parser("revoke", help="Revoke an API key")
    revoke_cmd.add_argument("--prefix", required=True, help="Key prefix of the API key to revoke")
    revoke_cmd.add_argument("--yes", action="store_true", help="Confirm revocation without prompt")
    revoke_cmd.set_defaults(func=cmd_revoke)

    requests_cmd = sub.add_parser("requests", help="List saved weather requests for a caller")
    requests_cmd.add_argument("--requester", required=True, help="Requester id (API key id)")
    requests_cmd.add_argument("--limit", type=int, default=20)
    requests_cmd.add_argument("--json", action="store_true", help="Return JSON output")
    requests_cmd.set_defaults(func=cmd_requests)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
