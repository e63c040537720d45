import sys

from runforge.cli import run_cli

sys.exit(run_cli())
