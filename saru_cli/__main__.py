"""Allow ``python -m saru_cli``."""

from saru_cli.cli import main

main()
