"""
Carga y validación de redes viales desde archivos de texto.

Una red se describe con tres archivos dentro de un directorio:

- crossings.sim: un cruce por línea, "<id>:<duración>t"
  (duración 0 = rotonda, 3-10 = intersección con semáforo)
- streets.sim: una calle por línea,
  "<inicio>--><fin>:<longitud>m,<tipo>x,<máxima>max" (tipo 1 simple, 2 adelantamiento)
- cars.sim: un auto por línea, "<id>,<calle>,<velocidad deseada>,<aceleración>"

Los IDs de calle se asignan en el orden del archivo, empezando en 0.
"""

import re
import logging
from pathlib import Path
from typing import Dict, List, Optional, Type, Union

from .car import Car
from .exceptions import NetworkFormatError, TrafficError
from .traffic_network import TrafficNetwork, LaneKind
from ..utils.config import (
    SimulatorConfig, StreetConfig, TrafficLightConfig
)

logger = logging.getLogger(__name__)

CROSSING_PATTERN = re.compile(r"(?P<id>\d+):(?P<duration>\d+)t", re.ASCII)
STREET_PATTERN = re.compile(
    r"(?P<start>\d+)-->(?P<end>\d+):(?P<length>\d+)m,(?P<lane>[12])x,(?P<max_speed>\d+)max",
    re.ASCII
)
CAR_PATTERN = re.compile(
    r"(?P<id>\d+),(?P<street>\d+),(?P<wished_speed>\d+),(?P<accelerator>\d+)",
    re.ASCII
)


class NetworkLoader:
    """
    Construye una TrafficNetwork validada a partir de líneas de texto.

    La validación sigue el orden de los archivos: primero cruces, luego
    calles, luego la regla de que todo cruce tenga calles entrantes y
    salientes, y por último los autos.
    """

    def __init__(self, crossings: List[str], streets: List[str], cars: List[str],
                 name: str = ""):
        """
        Inicializa el cargador.

        Args:
            crossings: Líneas de crossings.sim
            streets: Líneas de streets.sim
            cars: Líneas de cars.sim
            name: Nombre de la red
        """
        self.crossings = _clean_lines(crossings)
        self.streets = _clean_lines(streets)
        self.cars = _clean_lines(cars)
        self.name = name

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> TrafficNetwork:
        """
        Carga la red desde un directorio con los tres archivos .sim.

        Args:
            directory: Ruta al directorio de la red

        Returns:
            TrafficNetwork: Red validada y finalizada

        Raises:
            FileNotFoundError: Si falta el directorio o alguno de los archivos
            NetworkFormatError: Si algún archivo no puede leerse o su contenido no es válido
        """
        path = Path(directory)
        if not path.is_dir():
            raise FileNotFoundError(f"No se encontró el directorio: {directory}")

        lines = {}
        for file_name in (SimulatorConfig.CROSSINGS_FILE, SimulatorConfig.STREETS_FILE,
                          SimulatorConfig.CARS_FILE):
            file_path = path / file_name
            if not file_path.exists():
                raise FileNotFoundError(f"No se encontró el archivo: {file_path}")
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    lines[file_name] = f.read().splitlines()
            except (OSError, UnicodeDecodeError) as e:
                raise NetworkFormatError(f"cannot read {file_path}: {e}") from e

        loader = cls(lines[SimulatorConfig.CROSSINGS_FILE],
                     lines[SimulatorConfig.STREETS_FILE],
                     lines[SimulatorConfig.CARS_FILE],
                     name=path.name)
        return loader.build()

    def build(self) -> TrafficNetwork:
        """
        Valida las líneas y construye la red.

        Returns:
            TrafficNetwork: Red finalizada (semáforos creados, verde inicial asignado)

        Raises:
            NetworkFormatError: Si alguna línea o regla de la red no es válida
        """
        network = TrafficNetwork(self.name)
        self._add_crossings(network)
        self._add_streets(network)
        self._check_connections(network)
        self._add_cars(network)
        network.finalize()

        logger.info("✓ Red cargada: %s", network)
        return network

    def _add_crossings(self, network: TrafficNetwork):
        for line in self.crossings:
            match = _match(CROSSING_PATTERN, line, "cannot parse it into a node")
            node_id = parse_integer(match.group('id'))
            duration = parse_integer(match.group('duration'))

            if node_id in network.nodes:
                raise NetworkFormatError(f"id already exists: {node_id}")
            if duration != 0 and not (TrafficLightConfig.MIN_GREEN_DURATION <= duration
                                      <= TrafficLightConfig.MAX_GREEN_DURATION):
                raise NetworkFormatError(f"the duration is not valid: {line}")

            network.add_node(node_id, duration)

    def _add_streets(self, network: TrafficNetwork):
        max_streets = SimulatorConfig.MAX_STREETS_PER_NODE

        for line in self.streets:
            match = _match(STREET_PATTERN, line, "cannot parse it into a street")
            start = parse_integer(match.group('start'))
            end = parse_integer(match.group('end'))
            length = parse_integer(match.group('length'))
            speed_limit = parse_integer(match.group('max_speed'))
            lane = LaneKind.from_code(parse_integer(match.group('lane')))

            if start == end:
                raise NetworkFormatError(f"the start node and end node should be different: {line}")
            if start not in network.nodes or end not in network.nodes:
                raise NetworkFormatError(f"node does not exist: {line}")
            if len(network.nodes[end].incoming_edges) >= max_streets:
                raise NetworkFormatError(
                    f"the node is connected to four incoming streets already: {end}")
            if len(network.nodes[start].outgoing_edges) >= max_streets:
                raise NetworkFormatError(
                    f"the node is connected to four outgoing streets already: {start}")
            if not StreetConfig.MIN_LENGTH <= length <= StreetConfig.MAX_LENGTH:
                raise NetworkFormatError(f"length is not valid: {line}")
            if not StreetConfig.MIN_SPEED_LIMIT <= speed_limit <= StreetConfig.MAX_SPEED_LIMIT:
                raise NetworkFormatError(f"the speed is not valid: {line}")

            network.add_edge(start, end, length, speed_limit, lane)

    def _check_connections(self, network: TrafficNetwork):
        invalid = network.find_invalid_nodes()
        if invalid:
            raise NetworkFormatError(
                "the node must have at least one incoming street and one outgoing street: "
                f"{invalid[0]}")

    def _add_cars(self, network: TrafficNetwork):
        cars_by_edge: Dict[int, List[Car]] = {}
        seen_ids = set()

        for line in self.cars:
            match = _match(CAR_PATTERN, line, "the input of this car is not valid")
            car_id = parse_integer(match.group('id'))
            street_id = parse_integer(match.group('street'))
            wished_speed = parse_integer(match.group('wished_speed'))
            accelerator = parse_integer(match.group('accelerator'))

            if car_id in seen_ids:
                raise NetworkFormatError(f"id already exists: {car_id}")

            edge = network.get_edge(street_id)
            if edge is None:
                raise NetworkFormatError(f"this street id is not valid: {street_id}")

            street_cars = cars_by_edge.setdefault(street_id, [])
            if len(street_cars) == edge.capacity:
                raise NetworkFormatError(
                    f"Street {street_id} cannot have more than {edge.capacity} cars.")

            try:
                car = Car(car_id, wished_speed, accelerator)
            except ValueError as e:
                raise NetworkFormatError(str(e)) from e

            street_cars.append(car)
            seen_ids.add(car_id)

        for street_id, street_cars in cars_by_edge.items():
            network.edges[street_id].queue.place_initial_cars(street_cars)


def _clean_lines(lines: List[str]) -> List[str]:
    return [line for line in lines if line.strip()]


def _match(pattern: re.Pattern, line: str, message: str) -> re.Match:
    match: Optional[re.Match] = pattern.fullmatch(line)
    if match is None:
        raise NetworkFormatError(f"{message}: {line}")
    return match


def parse_integer(text: str, error_class: Type[TrafficError] = NetworkFormatError) -> int:
    """
    Convierte un número leído de la entrada en un entero de 32 bits.

    Args:
        text: Dígitos a convertir
        error_class: Excepción a lanzar si el número no entra en 32 bits

    Returns:
        int: Valor entero

    Raises:
        TrafficError: De tipo error_class, si el número es mayor a MAX_INTEGER
    """
    value = int(text)
    if value > SimulatorConfig.MAX_INTEGER:
        raise error_class(f"cannot parse {text} into an integer.")
    return value
