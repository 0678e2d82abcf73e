"""Allow ``python -m chiefr``."""

import sys

from chiefr.main import main

sys.exit(main())
