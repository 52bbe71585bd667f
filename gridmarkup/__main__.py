import sys

from gridmarkup.cli import main

sys.exit(main())
