import sys

from combiner.interface.cli.app import main

sys.exit(main())
