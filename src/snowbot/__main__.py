import sys

from snowbot.forecast.cli import main

sys.exit(main())
