from manesei.cli import app

app(prog_name="manesei")
