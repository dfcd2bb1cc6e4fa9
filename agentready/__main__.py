"""Allow ``python -m agentready``."""

import sys

from agentready.cli import main

sys.exit(main())
