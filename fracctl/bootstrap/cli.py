from fracctl.bootstrap.deps import get_cli
from fracindex.core.helpers.utils import scan


@scan("fracctl.bootstrap.commands")
def main():
    cli = get_cli()

    if cli.interactive:
        cli.cmdloop()
    else:
        cli.onecmd(cli.args.command)

    raise SystemExit(cli.exit_code)


if __name__ == "__main__":
    main()
