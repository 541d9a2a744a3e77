"""Allow ``python -m hugo_preproc``."""

from .cli import main

main()
