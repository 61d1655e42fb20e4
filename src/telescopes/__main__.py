"""Command-line interface."""
from telescopes.main import main


if __name__ == "__main__":
    raise SystemExit(main())
