import sys

from dirwatch.watcher import main

sys.exit(main())
