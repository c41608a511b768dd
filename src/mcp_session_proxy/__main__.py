import sys

from mcp_session_proxy.cli import main

sys.exit(main())
