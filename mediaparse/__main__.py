import sys

from mediaparse.cli import main


sys.exit(main())
