from rhachet_brains_anthropic.cli.cli import cli

if __name__ == "__main__":
    cli()
