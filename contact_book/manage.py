#!/usr/bin/env python3
"""
Maintenance commands for the contact book SQLite database.

Usage:
    python -m contact_book.manage --db ./contacts.db migrate
    python -m contact_book.manage --db ./contacts.db add Jane Doe 555-0100 jane@example.com

``add`` runs the same email/phone uniqueness check as the web form and
refuses to insert a duplicate.  If ``--db`` is omitted the path from
``DATABASE_URL`` is used.
"""

import argparse
import sqlite3
import sys
from typing import List, Optional

from contact_book.app.core.db import get_database_path, init_db
from contact_book.app.core.errors import ConflictError
from contact_book.app.schemas.contact import NewContact
from contact_book.app.services.contact_store import ContactStore
from contact_book.app.services.validation_service import ContactValidator


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Manage the contact book database (SQLite).")
    ap.add_argument("--db", help="Path to SQLite DB file (defaults to DATABASE_URL)")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("migrate", help="Create the database and apply pending migrations")

    add = sub.add_parser("add", help="Add a contact")
    add.add_argument("first_name")
    add.add_argument("last_name")
    add.add_argument("phone_number")
    add.add_argument("email")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    db_path = get_database_path(args.db)

    try:
        version = init_db(db_path)
    except sqlite3.Error as exc:
        print(f"[!] Migration failed: {exc}", file=sys.stderr)
        return 1
    if args.command == "migrate":
        print(f"[+] Database {db_path} at schema version {version}")
        return 0

    new_contact = NewContact.from_form(args.first_name, args.last_name, args.phone_number, args.email)
    if not new_contact.is_valid():
        print("[!] All four fields must be non-empty.", file=sys.stderr)
        return 2

    store = ContactStore(db_path)
    result = ContactValidator(store).validate(email=new_contact.email, phone=new_contact.phone_number)
    if not result.allowed:
        print(f"[!] {result.message}. Contact NOT SAVED", file=sys.stderr)
        return 1
    try:
        contact = store.create(new_contact)
    except ConflictError as exc:
        print(f"[!] {exc}. Contact NOT SAVED", file=sys.stderr)
        return 1
    print(f"[+] Created contact {contact.id}: {contact.full_name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
