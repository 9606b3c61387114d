import sys

from rdu.main import main

sys.exit(main())
