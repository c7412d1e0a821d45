"""
Simulador de tráfico por ticks sobre una red de calles.

Este módulo contiene el motor de simulación que modela:
- Red vial como grafo dirigido de cruces y calles
- Seguimiento y adelantamiento de autos en cada calle
- Semáforos con rotación cíclica del verde
- Traspaso de autos entre calles en cada tick
"""

from .counter import Counter
from .car import Car
from .edge_queue import EdgeQueue
from .traffic_light import TrafficLight
from .traffic_network import TrafficNetwork, Node, Edge, NodeKind, LaneKind
from .traffic_simulator import TrafficSimulator, CarLocation
from .network_loader import NetworkLoader
from .exceptions import TrafficError, NetworkFormatError, CarNotFoundError, CommandError

__all__ = [
    'Counter',
    'Car',
    'EdgeQueue',
    'TrafficLight',
    'TrafficNetwork',
    'Node',
    'Edge',
    'NodeKind',
    'LaneKind',
    'TrafficSimulator',
    'CarLocation',
    'NetworkLoader',
    'TrafficError',
    'NetworkFormatError',
    'CarNotFoundError',
    'CommandError'
]
