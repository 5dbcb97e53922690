"""Allow `python -m prepis`."""

from prepis.main import run

run()
