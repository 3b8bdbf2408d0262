"""Allow running uamount as ``python -m uamount``."""

from uamount.cli.main import app

app(prog_name="uamount")
