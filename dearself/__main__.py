import sys

from dearself.cli import main

sys.exit(main())
