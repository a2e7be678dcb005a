import sys

from dealsync.cli import main

sys.exit(main())
