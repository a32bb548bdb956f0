import sys

from clustermde._cli import main

sys.exit(main())
