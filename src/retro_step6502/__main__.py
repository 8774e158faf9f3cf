import sys

from retro_step6502.cli import main

sys.exit(main())
