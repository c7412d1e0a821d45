"""
Modelo de red vial como grafo dirigido.

Este módulo implementa la red de calles como una "arena" de cruces
(nodos) y calles (aristas) direccionados por IDs enteros estables:
las calles guardan el ID de sus nodos y las intersecciones guardan los
IDs de sus calles entrantes, sin referencias cruzadas entre objetos.
La topología se refleja además en un MultiDiGraph de networkx para
estadísticas y visualización.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple
import logging

import networkx as nx
import matplotlib.pyplot as plt

from .car import Car
from .edge_queue import EdgeQueue
from .traffic_light import TrafficLight
from ..utils.config import StreetConfig, SimulatorConfig

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """Tipos de cruce."""
    CIRCLE = "circle"              # Rotonda, sin semáforo
    INTERSECTION = "intersection"  # Cruce con semáforo


class LaneKind(Enum):
    """Tipos de carril de una calle."""
    SIMPLE = 1   # No se permite adelantar
    PASSING = 2  # Se permite adelantar

    @classmethod
    def from_code(cls, code: int) -> 'LaneKind':
        """Retorna el tipo de carril para el código de streets.sim (1 o 2)."""
        return cls(code)


class Node:
    """
    Representa un cruce de la red vial.

    Un cruce es una rotonda (CIRCLE) o una intersección (INTERSECTION).
    Sólo las intersecciones tienen semáforo; el semáforo se crea al
    finalizar la red, cuando se conoce el número de calles entrantes.
    """

    def __init__(self, node_id: int, green_duration: int = 0):
        """
        Inicializa un cruce.

        Args:
            node_id: Identificador único del cruce
            green_duration: Duración del verde en ticks; 0 significa rotonda
        """
        self.id = node_id
        self.kind = NodeKind.INTERSECTION if green_duration else NodeKind.CIRCLE
        self.green_duration = green_duration

        # IDs de calles en orden de conexión
        self.incoming_edges: List[int] = []
        self.outgoing_edges: List[int] = []

        # Semáforo (sólo intersecciones, se asigna en TrafficNetwork.finalize)
        self.traffic_light: Optional[TrafficLight] = None

    @property
    def is_intersection(self) -> bool:
        return self.kind == NodeKind.INTERSECTION

    def green_edge_id(self) -> Optional[int]:
        """Retorna el ID de la calle entrante con verde, o None si no hay semáforo."""
        if self.traffic_light is None:
            return None
        return self.incoming_edges[self.traffic_light.green_index]

    def __str__(self) -> str:
        return f"Node({self.id}: {self.kind.value})"

    def __repr__(self) -> str:
        return (f"Node(id={self.id}, kind={self.kind.value}, "
                f"incoming={self.incoming_edges}, outgoing={self.outgoing_edges})")


class Edge:
    """
    Representa una calle dirigida entre dos cruces.

    La calle es dueña de la cola ordenada de autos que circulan por ella
    y de dos banderas: si tiene verde en su cruce final y si ya se sabe
    que ningún auto puede moverse más en el tick actual.
    """

    def __init__(self, edge_id: int, start_node: int, end_node: int, length: int,
                 speed_limit: int, lane: LaneKind = LaneKind.SIMPLE):
        """
        Inicializa una calle.

        Args:
            edge_id: ID estable de la calle (orden de creación)
            start_node: ID del cruce de origen
            end_node: ID del cruce de destino
            length: Longitud en metros (10-10000)
            speed_limit: Velocidad máxima en metros por tick (5-40)
            lane: Tipo de carril

        Raises:
            ValueError: Si la longitud o la velocidad máxima no son válidas
        """
        if not StreetConfig.MIN_LENGTH <= length <= StreetConfig.MAX_LENGTH:
            raise ValueError(f"length is not valid: {length}")
        if not StreetConfig.MIN_SPEED_LIMIT <= speed_limit <= StreetConfig.MAX_SPEED_LIMIT:
            raise ValueError(f"the speed is not valid: {speed_limit}")

        self.id = edge_id
        self.start_node = start_node
        self.end_node = end_node
        self.length = length
        self.speed_limit = speed_limit
        self.lane = lane

        self.queue = EdgeQueue(length, speed_limit, self.overtaking_allowed)

        # Estado del tick
        self.has_green_light_access = False
        self.all_cars_settled = False

    @property
    def overtaking_allowed(self) -> bool:
        return self.lane == LaneKind.PASSING

    @property
    def capacity(self) -> int:
        """
        Número máximo de autos al cargar la red.

        Returns:
            int: length // MIN_GAP + 1
        """
        return self.length // SimulatorConfig.MIN_GAP + 1

    @property
    def cars(self) -> List[Car]:
        return self.queue.cars

    def is_empty(self) -> bool:
        return self.queue.is_empty()

    def reset(self):
        """Deja la calle y sus autos listos para el próximo tick."""
        self.queue.reset()
        self.all_cars_settled = False

    def get_occupancy_rate(self) -> float:
        """Retorna la ocupación de la calle respecto a su capacidad (0.0 a 1.0)."""
        return len(self.queue) / self.capacity

    def __str__(self) -> str:
        return f"Edge({self.id}: {self.start_node} → {self.end_node}, {self.length}m)"

    def __repr__(self) -> str:
        return (f"Edge(id={self.id}, from={self.start_node}, to={self.end_node}, "
                f"length={self.length}m, max={self.speed_limit}, lane={self.lane.name})")


class TrafficNetwork:
    """
    Representa la red vial completa como un grafo dirigido G = (V, E).

    Los cruces se guardan por ID y las calles en una lista cuyo índice es
    el ID de la calle. Se asume que la red ya fue validada por el
    cargador: cada cruce tiene entre 1 y 4 calles entrantes y salientes.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.nodes: Dict[int, Node] = {}
        self.edges: List[Edge] = []
        self.graph = nx.MultiDiGraph()
        self.is_finalized = False

    def add_node(self, node_id: int, green_duration: int = 0) -> Node:
        """
        Agrega un cruce a la red.

        Args:
            node_id: ID único del cruce
            green_duration: Duración del verde; 0 para una rotonda

        Returns:
            Node: El cruce creado

        Raises:
            ValueError: Si el ID ya existe
        """
        if node_id in self.nodes:
            raise ValueError(f"id already exists: {node_id}")

        node = Node(node_id, green_duration)
        self.nodes[node_id] = node
        self.graph.add_node(node_id, kind=node.kind.value, green_duration=green_duration)
        return node

    def add_edge(self, start_node: int, end_node: int, length: int, speed_limit: int,
                 lane: LaneKind = LaneKind.SIMPLE, cars: Optional[List[Car]] = None) -> Edge:
        """
        Agrega una calle (arista dirigida) a la red.

        El ID de la calle es su posición de creación. Los autos iniciales
        se colocan desde el final de la calle hacia atrás.

        Args:
            start_node: ID del cruce de origen
            end_node: ID del cruce de destino
            length: Longitud en metros
            speed_limit: Velocidad máxima
            lane: Tipo de carril
            cars: Autos iniciales, en orden de declaración

        Returns:
            Edge: La calle creada

        Raises:
            KeyError: Si alguno de los cruces no existe
        """
        edge = Edge(len(self.edges), start_node, end_node, length, speed_limit, lane)
        self.nodes[start_node].outgoing_edges.append(edge.id)
        self.nodes[end_node].incoming_edges.append(edge.id)
        self.edges.append(edge)

        if cars:
            edge.queue.place_initial_cars(cars)

        self.graph.add_edge(
            start_node, end_node, key=edge.id,
            length=length,
            speed_limit=speed_limit,
            lane=lane.name
        )
        return edge

    def finalize(self):
        """
        Crea los semáforos y da el verde inicial.

        Cada intersección recibe un semáforo con tantas calles como
        entrantes tenga, y la primera calle entrante conectada obtiene
        el verde.
        """
        for node in self.nodes.values():
            if node.is_intersection and node.traffic_light is None:
                node.traffic_light = TrafficLight(node.green_duration, len(node.incoming_edges))
                self.edges[node.green_edge_id()].has_green_light_access = True

        self.is_finalized = True
        logger.info("✓ Red finalizada: %d cruces, %d calles, %d autos",
                    len(self.nodes), len(self.edges), self.count_cars())

    def get_node(self, node_id: int) -> Optional[Node]:
        """Retorna el cruce con el ID dado."""
        return self.nodes.get(node_id)

    def get_edge(self, edge_id: int) -> Optional[Edge]:
        """Retorna la calle con el ID dado."""
        if 0 <= edge_id < len(self.edges):
            return self.edges[edge_id]
        return None

    def get_outgoing_edges(self, node_id: int) -> List[Edge]:
        """Retorna las calles salientes de un cruce en orden de conexión."""
        return [self.edges[edge_id] for edge_id in self.nodes[node_id].outgoing_edges]

    def get_incoming_edges(self, node_id: int) -> List[Edge]:
        """Retorna las calles entrantes de un cruce en orden de conexión."""
        return [self.edges[edge_id] for edge_id in self.nodes[node_id].incoming_edges]

    def get_intersections(self) -> List[Node]:
        return [node for node in self.nodes.values() if node.is_intersection]

    def count_cars(self) -> int:
        return sum(len(edge.queue) for edge in self.edges)

    def find_invalid_nodes(self) -> List[int]:
        """
        Busca cruces que no cumplen las reglas de conexión.

        Returns:
            Lista de IDs de cruces sin calle entrante o saliente,
            o con más de 4 de alguna de ellas
        """
        max_streets = SimulatorConfig.MAX_STREETS_PER_NODE
        invalid = []
        for node_id in self.graph.nodes():
            in_degree = self.graph.in_degree(node_id)
            out_degree = self.graph.out_degree(node_id)
            if not (1 <= in_degree <= max_streets and 1 <= out_degree <= max_streets):
                invalid.append(node_id)
        return invalid

    def to_graph(self) -> nx.MultiDiGraph:
        """Retorna una copia del grafo de networkx con la ocupación actual."""
        graph = self.graph.copy()
        for edge in self.edges:
            graph.edges[edge.start_node, edge.end_node, edge.id]['cars'] = len(edge.queue)
        return graph

    def get_network_stats(self) -> Dict:
        """
        Calcula estadísticas de la red.

        Returns:
            dict: Diccionario con estadísticas de la red
        """
        total_length = sum(edge.length for edge in self.edges)

        return {
            'num_nodes': len(self.nodes),
            'num_intersections': len(self.get_intersections()),
            'num_edges': len(self.edges),
            'num_cars': self.count_cars(),
            'total_length_m': total_length,
            'total_capacity': sum(edge.capacity for edge in self.edges),
            'is_connected': nx.is_weakly_connected(self.graph) if self.nodes else False,
            'network_name': self.name
        }

    def visualize(self, show_labels: bool = True, figsize: Tuple[int, int] = (10, 8)):
        """
        Visualiza la red vial con el número de autos por calle.

        Args:
            show_labels: Si True, muestra IDs de cruces y ocupación de calles
            figsize: Tamaño de la figura

        Returns:
            plt.Figure: Figura de matplotlib
        """
        fig = plt.figure(figsize=figsize)
        graph = self.to_graph()
        pos = nx.circular_layout(graph)

        node_colors = ['#FF6B6B' if self.nodes[node_id].is_intersection else '#4ECDC4'
                       for node_id in graph.nodes()]
        nx.draw_networkx_nodes(graph, pos, node_color=node_colors, node_size=500, alpha=0.9)

        edge_colors = ['green' if self.edges[key].has_green_light_access else 'gray'
                       for _, _, key in graph.edges(keys=True)]
        nx.draw_networkx_edges(graph, pos, edge_color=edge_colors, width=2, alpha=0.6,
                               arrows=True, arrowsize=20, arrowstyle='->',
                               connectionstyle='arc3,rad=0.1')

        if show_labels:
            nx.draw_networkx_labels(graph, pos, font_size=9)
            # Las calles paralelas comparten etiqueta
            edge_labels: Dict[Tuple[int, int], str] = {}
            for u, v, key, data in graph.edges(keys=True, data=True):
                label = f"{key}: {data['cars']}"
                edge_labels[(u, v)] = f"{edge_labels[(u, v)]}, {label}" if (u, v) in edge_labels else label
            nx.draw_networkx_edge_labels(nx.DiGraph(graph), pos, edge_labels=edge_labels, font_size=7)

        plt.title(self.name or "Red vial", fontsize=14, fontweight='bold')
        plt.axis('off')
        plt.tight_layout()

        return fig

    def __str__(self) -> str:
        return f"TrafficNetwork('{self.name}', {len(self.nodes)} nodes, {len(self.edges)} edges)"

    def __repr__(self) -> str:
        stats = self.get_network_stats()
        return (f"TrafficNetwork(name='{self.name}', "
                f"nodes={stats['num_nodes']}, "
                f"edges={stats['num_edges']}, "
                f"cars={stats['num_cars']})")
