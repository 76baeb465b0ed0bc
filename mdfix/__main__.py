"""Allow ``python -m mdfix``."""

from mdfix.main import cli

if __name__ == "__main__":
    cli()
