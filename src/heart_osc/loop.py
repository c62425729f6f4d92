import typer

from heart_osc.cli.commands.run import run_command
from heart_osc.cli.commands.scan import scan_command

app = typer.Typer(help="Forward BLE heart rate to OSC avatar parameters.")

app.command(name="run")(run_command)
app.command(name="scan")(scan_command)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
