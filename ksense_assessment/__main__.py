import sys

from ksense_assessment.cli import main

sys.exit(main())
