import sys

from jabreg.main import main

sys.exit(main())
