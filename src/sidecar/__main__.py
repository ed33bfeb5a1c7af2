from sidecar.cli import app

app(prog_name="sidecar")
