import sys

from blockwatch.cli import main

sys.exit(main())
