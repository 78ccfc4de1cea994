# SPDX-License-Identifier: MIT
import sys

from mkninja.cli import main

sys.exit(main())
