"""
Tests para la interfaz de comandos (CommandShell).
"""

import io
import pytest
import sys
from pathlib import Path

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.simulator.command_shell import CommandShell, main
from src.utils.config import DEMO_NETWORK_DIR


@pytest.fixture
def shell():
    """Shell que guarda la salida en una lista."""
    lines = []
    shell = CommandShell(output=lines.append)
    shell.lines = lines
    return shell


@pytest.fixture
def network_dir(tmp_path):
    """Red mínima: un auto al final de una calle de 100 m."""
    (tmp_path / "crossings.sim").write_text("1:0t\n2:0t\n")
    (tmp_path / "streets.sim").write_text("1-->2:100m,1x,40max\n2-->1:100m,1x,40max\n")
    (tmp_path / "cars.sim").write_text("1,0,40,10\n")
    return tmp_path


class TestCommands:
    """Tests de cada comando."""

    def test_command_before_load(self, shell):
        """Test de comandos sin red cargada."""
        shell.execute("position 1")
        shell.execute("simulate 3")

        assert shell.lines == ["Error: Street network is yet to be loaded."] * 2

    def test_invalid_input(self, shell):
        """Test de comandos mal formados."""
        for command in ["", "simulate", "simulate -1", "position x", "jump 3", "QUIT"]:
            shell.execute(command)

        assert shell.lines == ["Error: input is not valid."] * 6

    def test_load(self, shell, network_dir):
        """Test de carga de red."""
        shell.execute(f"load {network_dir}")

        assert shell.lines == ["READY"]
        assert shell.simulator is not None

    def test_position(self, shell, network_dir):
        """Test de ubicación de un auto."""
        shell.execute(f"load {network_dir}")
        shell.execute("position 1")

        assert shell.lines[-1] == "Car 1 on street 0 with speed 0 and position 100"

    def test_position_unknown_car(self, shell, network_dir):
        """Test de auto inexistente."""
        shell.execute(f"load {network_dir}")
        shell.execute("position 99")

        assert shell.lines[-1] == "Error: There is no car with the identifier 99."

    def test_simulate(self, shell, network_dir):
        """Test de simulación y posición posterior."""
        shell.execute(f"load {network_dir}")
        shell.execute("simulate 2")
        shell.execute("position 1")

        # Tick 1: pasa a la calle 1 en 10; tick 2: avanza 20
        assert shell.lines == ["READY", "READY",
                               "Car 1 on street 1 with speed 20 and position 30"]

    def test_load_missing_directory(self, shell, tmp_path):
        """Test de carga de un directorio inexistente."""
        shell.execute(f"load {tmp_path / 'no_existe'}")

        assert len(shell.lines) == 1
        assert shell.lines[0].startswith("Error: ")
        assert shell.simulator is None

    def test_failed_load_keeps_previous_network(self, shell, network_dir, tmp_path):
        """Test de que una carga inválida no reemplaza la red anterior."""
        bad_dir = tmp_path / "bad"
        bad_dir.mkdir()
        (bad_dir / "crossings.sim").write_text("1:0t\n1:0t\n")
        (bad_dir / "streets.sim").write_text("")
        (bad_dir / "cars.sim").write_text("")

        shell.execute(f"load {network_dir}")
        simulator = shell.simulator
        shell.execute(f"load {bad_dir}")

        assert shell.lines[-1] == "Error: id already exists: 1"
        assert shell.simulator is simulator


    def test_oversized_numbers(self, shell, network_dir):
        """Test de números que no entran en 32 bits."""
        shell.execute(f"load {network_dir}")
        shell.execute("position 99999999999999999999")
        shell.execute("simulate 2147483648")

        assert shell.lines[1:] == [
            "Error: cannot parse 99999999999999999999 into an integer.",
            "Error: cannot parse 2147483648 into an integer.",
        ]
        assert shell.simulator.current_tick == 0

    def test_non_ascii_digits(self, shell, network_dir):
        """Test de dígitos que no son ASCII."""
        shell.execute(f"load {network_dir}")
        shell.execute("position ١")

        assert shell.lines[-1] == "Error: input is not valid."


class TestUnreadableFiles:
    """Tests de archivos de red que no pueden leerse."""

    def test_file_is_a_directory(self, shell, tmp_path):
        """Test de crossings.sim que es un directorio."""
        (tmp_path / "crossings.sim").mkdir()
        (tmp_path / "streets.sim").write_text("1-->2:100m,1x,30max\n")
        (tmp_path / "cars.sim").write_text("")

        shell.run([f"load {tmp_path}", f"load {DEMO_NETWORK_DIR}"])

        assert shell.lines[0].startswith("Error: ")
        assert shell.lines[1] == "READY"
        assert shell.is_running

    def test_invalid_utf8(self, shell, tmp_path):
        """Test de archivo con bytes que no son UTF-8."""
        (tmp_path / "crossings.sim").write_bytes(b"1:0t\n\xff\xfe\n")
        (tmp_path / "streets.sim").write_text("1-->1:100m,1x,30max\n")
        (tmp_path / "cars.sim").write_text("")

        shell.run([f"load {tmp_path}", f"load {DEMO_NETWORK_DIR}"])

        assert shell.lines[0].startswith("Error: ")
        assert shell.lines[1] == "READY"


class TestSession:
    """Tests de sesiones completas."""

    def test_run_stops_at_quit(self, shell):
        """Test de fin de sesión con quit."""
        shell.run([f"load {DEMO_NETWORK_DIR}\n", "quit\n", "position 1\n"])

        assert shell.lines == ["READY"]
        assert not shell.is_running

    def test_errors_do_not_end_session(self, shell):
        """Test de que los errores no terminan la sesión."""
        shell.run(["position 1", f"load {DEMO_NETWORK_DIR}", "position 2"])

        assert shell.lines == ["Error: Street network is yet to be loaded.",
                               "READY",
                               "Car 2 on street 0 with speed 0 and position 90"]
        assert shell.is_running

    def test_main_reads_stdin(self, monkeypatch, capsys):
        """Test del punto de entrada de consola."""
        monkeypatch.setattr(sys, "stdin", io.StringIO(f"load {DEMO_NETWORK_DIR}\nposition 3\nquit\n"))

        main([])

        output = capsys.readouterr().out.splitlines()
        assert output == ["READY", "Car 3 on street 1 with speed 0 and position 80"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
