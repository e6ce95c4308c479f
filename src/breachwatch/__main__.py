"""Allow running breachwatch with ``python -m breachwatch``."""

from breachwatch.cli import main

main(prog_name="breachwatch")
