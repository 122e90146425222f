import sys

from create_lamdera_app.cli.commands import main

sys.exit(main())
