"""Minimal launcher for the documentation-site toolchain.

Its single responsibility is to delegate to :func:`docsite.cli.main` so the
toolchain can be run from a checkout without installing the package.

Usage:
    python site_cli.py <build|run [--build]|clean|lint|help>

"""

from __future__ import annotations

import sys


def entry_point(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit status.

    The import is performed inside the function so importing this launcher
    stays cheap.
    """
    from docsite.cli import main

    return main(argv)


if __name__ == "__main__":
    sys.exit(entry_point())
