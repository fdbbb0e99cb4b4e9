import sys

from acclog.cli import main

sys.exit(main())
