"""
Modelo de auto para la simulación por ticks.

Este módulo implementa el estado mutable de un auto individual:
posición sobre la calle actual, velocidad, contador de dirección
y la marca de "actualizado en este tick".
"""

from typing import Dict

from .counter import Counter
from ..utils.config import CarConfig, SimulatorConfig


class Car:
    """
    Representa un auto de la red vial.

    El auto no conoce la calle en la que está: su posición se mide en
    metros desde el inicio de la calle que lo contiene (0 = nodo de
    inicio). Cuando cambia de calle se reconstruye con copy() en la
    calle destino y la copia original se descarta.
    """

    def __init__(self, car_id: int, wished_speed: int, accelerator: int,
                 position: int = 0, current_speed: int = 0):
        """
        Inicializa un auto.

        Args:
            car_id: Identificador único del auto
            wished_speed: Velocidad deseada en metros por tick (20-40)
            accelerator: Aceleración en metros por tick² (1-10)
            position: Metros recorridos sobre la calle actual
            current_speed: Velocidad actual en metros por tick

        Raises:
            ValueError: Si la velocidad deseada o la aceleración están fuera de rango
        """
        if not CarConfig.MIN_WISHED_SPEED <= wished_speed <= CarConfig.MAX_WISHED_SPEED:
            raise ValueError(f"the speed is not valid: {wished_speed}")
        if not CarConfig.MIN_ACCELERATOR <= accelerator <= CarConfig.MAX_ACCELERATOR:
            raise ValueError(f"the accelerator is not valid: {accelerator}")

        # Identificación
        self.id = car_id

        # Física del auto
        self.wished_speed = wished_speed
        self.accelerator = accelerator
        self.current_speed = current_speed
        self.position = position

        # Próxima salida a tomar (round-robin entre cruces sucesivos)
        self.direction_counter = Counter(SimulatorConfig.DIRECTION_PERIOD)

        # Estado del tick actual
        self.updated = False

    @property
    def wished_direction(self) -> int:
        """Índice de la calle saliente que el auto desea tomar."""
        return self.direction_counter.value

    def advance_direction(self):
        """Pasa a la siguiente salida deseada."""
        self.direction_counter.advance()

    def next_speed(self, max_speed: int) -> int:
        """
        Calcula la velocidad candidata para este tick.

        Args:
            max_speed: Velocidad máxima de la calle

        Returns:
            int: min(velocidad actual + aceleración, velocidad deseada, máxima)
        """
        return min(self.current_speed + self.accelerator, self.wished_speed, max_speed)

    def mark_updated(self):
        self.updated = True

    def reset(self):
        """Deja el auto listo para el próximo tick."""
        self.updated = False

    def copy(self) -> 'Car':
        """
        Reconstruye el auto para colocarlo en otra calle.

        Returns:
            Car: Auto nuevo con el mismo estado, sin compartir el contador
        """
        clone = Car(self.id, self.wished_speed, self.accelerator,
                    position=self.position, current_speed=self.current_speed)
        clone.direction_counter = self.direction_counter.copy()
        clone.updated = self.updated
        return clone

    def get_statistics(self) -> Dict:
        """Retorna el estado del auto como diccionario."""
        return {
            'car_id': self.id,
            'position': self.position,
            'speed': self.current_speed,
            'wished_speed': self.wished_speed,
            'accelerator': self.accelerator,
            'wished_direction': self.wished_direction
        }

    def __str__(self) -> str:
        return f"Car({self.id}: pos={self.position}m, v={self.current_speed})"

    def __repr__(self) -> str:
        return (f"Car(id={self.id}, position={self.position}, "
                f"speed={self.current_speed}, wished={self.wished_speed}, "
                f"accel={self.accelerator}, updated={self.updated})")
