#!/usr/bin/env python3
"""Linux MCP Server - main entry point.

Equivalent to the installed ``linux-mcp-server`` command. Register it with an
MCP client by pointing the client at this script, for example::

    {
      "mcpServers": {
        "linux": {
          "command": "python",
          "args": ["/path/to/main.py", "--config", "/path/to/config.yaml"]
        }
      }
    }

Requires the package to be installed (``pip install -e .``). See
src/linux_mcp_server/main.py for configuration options.
"""

from __future__ import annotations

import sys

from linux_mcp_server.main import main

if __name__ == "__main__":
    sys.exit(main())
