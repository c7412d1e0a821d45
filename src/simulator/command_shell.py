"""
Interfaz de comandos interactiva del simulador.

Comandos disponibles (uno por línea):

    load <ruta>         Carga una red desde un directorio con archivos .sim
    simulate <ticks>    Avanza la simulación el número de ticks indicado
    position <id>       Muestra calle, velocidad y posición de un auto
    quit                Termina la sesión

Los errores se informan con el prefijo "Error: " y nunca terminan la sesión.
"""

import re
import sys
import logging
import argparse
from typing import Callable, Iterable, Optional

from .exceptions import CarNotFoundError, CommandError, TrafficError
from .network_loader import NetworkLoader, parse_integer
from .traffic_simulator import TrafficSimulator
from ..utils.config import setup_logging

logger = logging.getLogger(__name__)

MESSAGE_READY = "READY"
CAR_DETAILS = "Car {car_id} on street {edge_id} with speed {speed} and position {position}"

QUIT_COMMAND = "quit"
LOAD_PATTERN = re.compile(r"load (?P<path>\S+)", re.ASCII)
SIMULATE_PATTERN = re.compile(r"simulate (?P<ticks>\d+)", re.ASCII)
POSITION_PATTERN = re.compile(r"position (?P<car_id>\d+)", re.ASCII)


class CommandShell:
    """
    Intérprete de comandos sobre un TrafficSimulator.

    Cada comando produce sus líneas de salida a través de `output`
    (por defecto print), de modo que la sesión pueda probarse sin stdin.
    """

    def __init__(self, output: Callable[[str], None] = print):
        self.output = output
        self.simulator: Optional[TrafficSimulator] = None
        self.is_running = True

    def run(self, lines: Iterable[str]):
        """
        Procesa comandos hasta "quit" o hasta agotar la entrada.

        Args:
            lines: Fuente de líneas de comando (ej: sys.stdin)
        """
        for line in lines:
            self.execute(line.rstrip("\n"))
            if not self.is_running:
                break

    def execute(self, command: str):
        """
        Ejecuta un comando e informa cualquier error por la salida.

        Args:
            command: Línea de comando
        """
        logger.debug("Comando recibido: %r", command)

        if command == QUIT_COMMAND:
            self.is_running = False
            return

        try:
            self._dispatch(command)
        except TrafficError as e:
            self.output(str(e))
        except OSError as e:
            self.output(f"{TrafficError.PREFIX}{e}")

    def _dispatch(self, command: str):
        load_match = LOAD_PATTERN.fullmatch(command)
        if load_match:
            self.load(load_match.group('path'))
            return

        simulate_match = SIMULATE_PATTERN.fullmatch(command)
        position_match = POSITION_PATTERN.fullmatch(command)
        if not simulate_match and not position_match:
            raise CommandError("input is not valid.")
        if self.simulator is None:
            raise CommandError("Street network is yet to be loaded.")

        if simulate_match:
            self.simulate(parse_integer(simulate_match.group('ticks'), CommandError))
        else:
            self.position(parse_integer(position_match.group('car_id'), CommandError))

    def load(self, path: str):
        """Carga una red; la red anterior sólo se reemplaza si la carga es válida."""
        network = NetworkLoader.from_directory(path)
        self.simulator = TrafficSimulator(network)
        self.output(MESSAGE_READY)

    def simulate(self, ticks: int):
        self.simulator.run(ticks)
        self.output(MESSAGE_READY)

    def position(self, car_id: int):
        """
        Informa la ubicación de un auto.

        Raises:
            CarNotFoundError: Si el auto no está en ninguna calle
        """
        location = self.simulator.locate_car(car_id)
        if location is None:
            raise CarNotFoundError(car_id)

        self.output(CAR_DETAILS.format(car_id=car_id, edge_id=location.edge_id,
                                       speed=location.speed, position=location.position))


def main(argv: Optional[list] = None):
    """Punto de entrada de la consola `traffic-sim`."""
    parser = argparse.ArgumentParser(description="Simulador de tráfico por ticks")
    parser.add_argument("--log-level", default="WARNING",
                        help="Nivel de logging (DEBUG, INFO, WARNING, ...)")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    CommandShell().run(sys.stdin)


if __name__ == "__main__":
    main()
