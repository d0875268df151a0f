import sys

from armdisasm.cli import main

sys.exit(main())
