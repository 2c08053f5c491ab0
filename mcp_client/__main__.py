import sys

from mcp_client.client import main

sys.exit(main())
