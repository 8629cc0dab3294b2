"""Module entry point for `python -m proto_schema_diff`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
