"""
Motor principal de simulación de tráfico por ticks.

Este módulo implementa el simulador que coordina todos los componentes
en cada tick:
1. Asentamiento de cada calle en orden de ID ascendente (movimiento
   local y traspaso de autos a la calle siguiente)
2. Reinicio de las banderas del tick
3. Rotación de los semáforos de las intersecciones
"""

from typing import Dict, List, NamedTuple, Optional
import logging

from .traffic_network import TrafficNetwork, Edge
from ..utils.config import SimulatorConfig

logger = logging.getLogger(__name__)

MIN_GAP = SimulatorConfig.MIN_GAP


class CarLocation(NamedTuple):
    """Ubicación de un auto: calle, velocidad y posición sobre la calle."""
    edge_id: int
    speed: int
    position: int


class TrafficSimulator:
    """
    Motor principal de simulación.

    Avanza la red de a un tick por vez. El orden de evaluación es
    determinista: calles por ID ascendente y, dentro de una calle,
    autos por posición descendente.
    """

    def __init__(self, network: TrafficNetwork, record_history: bool = False):
        """
        Inicializa el simulador.

        Args:
            network: Red vial ya validada
            record_history: Si True, guarda una foto del estado en cada tick
        """
        if not network.is_finalized:
            network.finalize()

        self.network = network
        self.current_tick = 0

        # Historial de estados (para métricas)
        self.record_history = record_history
        self.history: List[Dict] = []

        logger.info("✓ Simulador inicializado: %s", network)

    def run(self, ticks: int) -> Dict:
        """
        Ejecuta la simulación durante un número de ticks.

        Args:
            ticks: Número de ticks a simular

        Returns:
            dict: Estado de la simulación al terminar
        """
        for _ in range(ticks):
            self.advance_one_tick()

        logger.info("Simulados %d ticks (tick actual: %d)", ticks, self.current_tick)
        return self.get_current_state()

    def advance_one_tick(self):
        """
        Ejecuta un tick de simulación.

        Este es el método central que coordina todas las actualizaciones.
        """
        # 1. Asentar cada calle (orden de ID ascendente)
        for edge in self.network.edges:
            self._settle_edge(edge)

        # 2. Dejar autos y calles listos para el próximo tick
        for edge in self.network.edges:
            edge.reset()

        # 3. Actualizar semáforos
        self._update_traffic_lights()

        self.current_tick += 1

        if self.record_history:
            self.history.append(self.get_snapshot())

    def _settle_edge(self, edge: Edge):
        """
        Mueve los autos de una calle hasta que ninguno pueda avanzar más.

        Mientras el primer auto desee salir de la calle se intenta
        traspasarlo; en cuanto no desee o no pueda salir, se actualiza la
        calle localmente y se marca como asentada.

        Args:
            edge: Calle a asentar
        """
        queue = edge.queue
        while not (edge.all_cars_settled or queue.is_empty() or queue.all_updated()):
            # Se calcula con la velocidad previa a la actualización local
            wished_distance = queue.first_car_wished_distance()

            if wished_distance <= 0:
                queue.update_cars()
                edge.all_cars_settled = True
            else:
                self._transfer_first_car(edge, wished_distance)

    def _transfer_first_car(self, edge: Edge, wished_distance: int):
        """
        Intenta traspasar el primer auto de una calle a su próxima calle.

        Args:
            edge: Calle de origen
            wished_distance: Metros que el auto desea recorrer en la calle siguiente
        """
        end_node = self.network.nodes[edge.end_node]

        # Semáforo en rojo: todos los autos se quedan en la calle
        if end_node.is_intersection and not edge.has_green_light_access:
            self._keep_cars(edge)
            return

        queue = edge.queue
        car = queue.first_car()
        next_edge = self._select_next_edge(edge, car.wished_direction)

        # Sin espacio en la calle siguiente
        available_distance = next_edge.queue.last_car_position()
        if not next_edge.is_empty() and available_distance < MIN_GAP:
            logger.debug("Tick %d: auto %d espera en calle %d (calle %d llena)",
                         self.current_tick, car.id, edge.id, next_edge.id)
            self._keep_cars(edge)
            return

        # El auto pasa a la calle siguiente
        car.mark_updated()
        car.advance_direction()
        queue.update_first_car_speed()

        if next_edge.is_empty():
            movement = min(wished_distance, next_edge.length)
        else:
            movement = min(wished_distance, available_distance - MIN_GAP)

        # Giro puro: del final de la calle a la posición 0 de la siguiente
        if queue.is_first_car_at_end() and movement == 0:
            car.current_speed = 0

        next_edge.queue.add_car(car.copy(), movement)
        queue.remove_first_car()

        logger.debug("Tick %d: auto %d pasa de calle %d a calle %d (%d m)",
                     self.current_tick, car.id, edge.id, next_edge.id, movement)

    def _keep_cars(self, edge: Edge):
        edge.all_cars_settled = True
        edge.queue.update_cars()

    def _select_next_edge(self, edge: Edge, wished_direction: int) -> Edge:
        """
        Elige la calle saliente del cruce final según la dirección deseada.

        Args:
            edge: Calle de origen
            wished_direction: Valor del contador de dirección del auto

        Returns:
            Edge: Calle saliente wished_direction, o la calle 0 si no existe
        """
        outgoing = self.network.get_outgoing_edges(edge.end_node)
        if len(outgoing) < wished_direction + 1:
            return outgoing[0]
        return outgoing[wished_direction]

    def _update_traffic_lights(self):
        """Actualiza el estado de todos los semáforos."""
        for node in self.network.get_intersections():
            light = node.traffic_light
            if light.is_end_of_duration():
                self.network.edges[node.green_edge_id()].has_green_light_access = False
                light.rotate()
                self.network.edges[node.green_edge_id()].has_green_light_access = True
                logger.debug("Tick %d: cruce %d da verde a la calle %d",
                             self.current_tick, node.id, node.green_edge_id())
            light.advance_duration()

    def locate_car(self, car_id: int) -> Optional[CarLocation]:
        """
        Busca un auto en la red.

        Args:
            car_id: ID del auto

        Returns:
            CarLocation con calle, velocidad y posición, o None si no existe
        """
        for edge in self.network.edges:
            car = edge.queue.get_car(car_id)
            if car is not None:
                return CarLocation(edge.id, car.current_speed, car.position)
        return None

    def get_snapshot(self) -> Dict:
        """
        Retorna una foto del estado de autos y semáforos en el tick actual.

        Returns:
            dict: {'tick', 'cars': [...], 'green_edges': {node_id: edge_id}}
        """
        cars = []
        for edge in self.network.edges:
            for car in edge.cars:
                record = car.get_statistics()
                record['edge_id'] = edge.id
                cars.append(record)

        return {
            'tick': self.current_tick,
            'cars': cars,
            'green_edges': {
                node.id: node.green_edge_id()
                for node in self.network.get_intersections()
            }
        }

    def get_current_state(self) -> Dict:
        """
        Retorna el estado actual resumido de la simulación.

        Returns:
            dict: Estado actual
        """
        return {
            'tick': self.current_tick,
            'cars': self.network.count_cars(),
            'traffic_lights': {
                node.id: node.traffic_light.get_state()
                for node in self.network.get_intersections()
            },
            'occupancy': {
                edge.id: len(edge.queue)
                for edge in self.network.edges
            }
        }

    def __repr__(self) -> str:
        return f"TrafficSimulator(tick={self.current_tick}, network={self.network!r})"


if __name__ == "__main__":
    # Ejemplo de uso
    import sys
    from pathlib import Path
    sys.path.insert(0, str(Path(__file__).parent.parent.parent))

    from src.simulator.network_loader import NetworkLoader
    from src.utils.config import DEMO_NETWORK_DIR, setup_logging

    setup_logging()

    print("=" * 70)
    print("EJEMPLO: Simulador de Tráfico")
    print("=" * 70)

    network = NetworkLoader.from_directory(DEMO_NETWORK_DIR)
    simulator = TrafficSimulator(network)
    state = simulator.run(ticks=10)

    for key, value in state.items():
        print(f"  {key:15s}: {value}")
