"""Console script shim; the CLI lives in `lawflow.main`."""

from __future__ import annotations

from lawflow.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
