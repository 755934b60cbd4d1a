import sys

from pyfree.cli import main

sys.exit(main())
