"""Allow ``python -m event_reconciler``."""

from .cli import main

main()
