#!/usr/bin/env python3
"""mcp-session-proxy - Main entry point.

A local MCP server that runs Python tools either in its own process or,
when a session is attached, inside that session.

================================================================================
DEVELOPER GUIDE: Serving Your Own Tools
================================================================================

1. WRITE A TOOL SOURCE FILE
   Create a .py file with a module-level ``tools`` list. See
   examples/example_tools.py for a complete file.

       from mcp_session_proxy import tool, type_string

       def shout(text: str) -> str:
           return text.upper()

       tools = [tool(shout, "Upper-case some text", arguments={
           "text": type_string("The text to upper-case."),
       })]

   Tool functions must be defined at module level: a session receives a
   reference to the function, not the function itself.

2. CONFIGURE YOUR MCP CLIENT

       {"command": "python", "args": ["main.py", "server", "--tools", "tools.py"]}

3. (OPTIONAL) ATTACH A SESSION

       python main.py session --tools tools.py

   While a session is attached, every tool call except list_r_sessions and
   select_r_session runs inside the session process.

RESERVED NAMES
--------------
``list_r_sessions`` and ``select_r_session`` are built in. A tool list that
defines either name is rejected at startup.

================================================================================
"""

from __future__ import annotations

import sys

from mcp_session_proxy.cli import main

if __name__ == "__main__":
    sys.exit(main())
