"""Allow ``python -m instantiator``."""

from .cli import main

main()
