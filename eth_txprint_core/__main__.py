import sys

from eth_txprint_core.cli import main

sys.exit(main())
