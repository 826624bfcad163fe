import sys

from notion_mcp.app.main import main

sys.exit(main())
