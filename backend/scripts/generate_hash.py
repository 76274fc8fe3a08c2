#!/usr/bin/env python3
"""Print an Argon2 password hash for an entry of the credential file (users.json)."""
from __future__ import annotations

import getpass
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from travelblog.core.security import PasswordHasher


if __name__ == "__main__":
    password = sys.argv[1] if len(sys.argv) > 1 else getpass.getpass("Password: ")
    if not password:
        print("Usage: python scripts/generate_hash.py <password>", file=sys.stderr)
        sys.exit(1)
    print(PasswordHasher.hash(password))
    print("Copy this hash into the passwordHash field of users.json", file=sys.stderr)
