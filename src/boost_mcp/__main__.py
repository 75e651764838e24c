import sys

from boost_mcp.main import main

sys.exit(main())
