from inkwell.cli import app

app()
