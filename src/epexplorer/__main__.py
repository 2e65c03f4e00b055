import sys

from epexplorer.cli import main

sys.exit(main())
