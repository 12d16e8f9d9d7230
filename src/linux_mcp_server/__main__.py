"""Allow ``python -m linux_mcp_server``."""

import sys

from linux_mcp_server.main import main

sys.exit(main())
