"""Allow ``python -m covannot``."""

from covannot.cli.main import main

main()
