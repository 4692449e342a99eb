"""Allow ``python -m postcorpus``."""

from postcorpus.cli import app


def run() -> None:
    """Entry point used by the console script."""
    app(prog_name="postcorpus")


if __name__ == "__main__":
    run()
