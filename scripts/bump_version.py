"""Bump or set the hostshare version in pyproject.toml and src/hostshare/__init__.py.

Usage:
    python scripts/bump_version.py --patch          # 0.1.0 → 0.1.1
    python scripts/bump_version.py --minor          # 0.1.1 → 0.2.0
    python scripts/bump_version.py --major          # 0.2.0 → 1.0.0
    python scripts/bump_version.py --set 1.2.3
    python scripts/bump_version.py --minor --dry-run
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
PYPROJECT = ROOT / "pyproject.toml"
INIT_PY = ROOT / "src" / "hostshare" / "__init__.py"

VERSION_RE = re.compile(r'^(version\s*=\s*")(\d+\.\d+\.\d+)(")', re.MULTILINE)
INIT_VERSION_RE = re.compile(r'^(__version__\s*=\s*")(\d+\.\d+\.\d+)(")', re.MULTILINE)
SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+$")

Version = tuple[int, int, int]


def parse(text: str) -> Version:
    major, minor, patch = (int(p) for p in text.split("."))
    return major, minor, patch


def fmt(version: Version) -> str:
    return ".".join(str(p) for p in version)


def current_version(pyproject_text: str) -> Version:
    match = VERSION_RE.search(pyproject_text)
    if not match:
        sys.exit("error: could not find version in pyproject.toml")
    return parse(match.group(2))


def bump(version: Version, part: str) -> Version:
    major, minor, patch = version
    if part == "major":
        return major + 1, 0, 0
    if part == "minor":
        return major, minor + 1, 0
    return major, minor, patch + 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Bump or set the project version")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--major", action="store_const", const="major", dest="part")
    group.add_argument("--minor", action="store_const", const="minor", dest="part")
    group.add_argument("--patch", action="store_const", const="patch", dest="part")
    group.add_argument("--set", metavar="X.Y.Z", dest="explicit")
    parser.add_argument("--dry-run", action="store_true", help="print the change only")
    args = parser.parse_args()

    text = PYPROJECT.read_text()
    old = current_version(text)
    if args.explicit is not None:
        if not SEMVER_RE.match(args.explicit):
            sys.exit(f"error: not a X.Y.Z version: {args.explicit!r}")
        new = parse(args.explicit)
    else:
        new = bump(old, args.part)

    print(f"{fmt(old)} → {fmt(new)}")
    if args.dry_run:
        return

    PYPROJECT.write_text(VERSION_RE.sub(rf"\g<1>{fmt(new)}\3", text, count=1))

    init_text = INIT_PY.read_text()
    if not INIT_VERSION_RE.search(init_text):
        sys.exit("error: __version__ not found in src/hostshare/__init__.py")
    INIT_PY.write_text(INIT_VERSION_RE.sub(rf"\g<1>{fmt(new)}\3", init_text))


if __name__ == "__main__":
    main()
