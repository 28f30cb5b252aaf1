#!/usr/bin/env python3
"""
Reset a meeting's owner password in the BoardTime SQLite database.

This script DOES NOT read or reveal the existing password.  It stores
a new hash (same format as the API, see ``core.security``) for the
given meeting, for owners who lost the password they chose at
creation time.

Usage:
    python reset_meeting_password.py --db ./boardtime_api/boardtime.db --meeting 3f2a... --password "NewPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from boardtime_api.app.core.security import hash_password


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Reset a BoardTime meeting owner password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./boardtime_api/boardtime.db)")
    ap.add_argument("--meeting", required=True, help="Meeting id to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id, title FROM meetings WHERE id = ?", (args.meeting,))
        row = cur.fetchone()
        if not row:
            print(f"[!] No meeting found with id: {args.meeting}", file=sys.stderr)
            return 2

        cur.execute(
            "UPDATE meetings SET password_hash = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (hash_password(new_password), args.meeting),
        )
        cur.execute(
            "INSERT INTO audit_logs (meeting_id, actor, action, object_type, object_id) VALUES (?, ?, ?, ?, ?)",
            (args.meeting, "operator", "reset_password", "meeting", args.meeting),
        )
        conn.commit()
        print(f"[+] Password updated for meeting: {row[1]} ({args.meeting})")
        return 0
    finally:
        conn.close()


if __name__ == "__main__":
    sys.exit(main())
