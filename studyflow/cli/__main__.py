"""Allow ``python -m studyflow.cli`` execution."""

import sys

from studyflow.cli.chunk import main

sys.exit(main())
