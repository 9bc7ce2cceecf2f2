import sys

from clipdump.main import main

sys.exit(main())
