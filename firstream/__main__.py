import sys

from firstream.cli import main

sys.exit(main())
