"""
allow running venvstrap with `python -m venvstrap`.
"""

from __future__ import annotations

import sys

from .cli import main

sys.exit(main())
