import sys

from giantswarm_apps_mcp.cli import main

sys.exit(main())
