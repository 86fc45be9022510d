"""Module entry point for `python -m catalog_e2e_tester`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
