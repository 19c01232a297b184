from buildplan.cli import cli

cli()
