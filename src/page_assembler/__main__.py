"""Entry point for ``python -m page_assembler``."""

import sys

from page_assembler.cli import main

sys.exit(main())
