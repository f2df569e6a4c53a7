import sys

from research_feed.cli import main

sys.exit(main())
