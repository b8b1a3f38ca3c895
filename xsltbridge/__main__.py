import sys

from xsltbridge.cli import main

sys.exit(main())
