"""Allow ``python -m fuzzysig``."""

from fuzzysig.cli.app import app

if __name__ == "__main__":
    app()
