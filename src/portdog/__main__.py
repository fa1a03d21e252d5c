import sys

from portdog.cli import main

sys.exit(main())
