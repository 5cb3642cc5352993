import sys

from notion_mcp_setup.cli import main

sys.exit(main())
