import sys

from kanbanchan.main import main

sys.exit(main())
