import sys

from ast2go.cli import main

sys.exit(main())
