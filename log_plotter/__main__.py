import sys

from log_plotter.cli import main

sys.exit(main())
