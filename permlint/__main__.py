from permlint.cli import cli

cli()
