"""
Modelo de semáforo de un cruce con rotación cíclica del verde.

Este módulo implementa el semáforo de una intersección: un contador de
duración del verde y un indicador de qué calle entrante tiene acceso.
En cada momento exactamente una calle entrante tiene luz verde, y el
verde rota a la siguiente calle (en orden de conexión) cada
`green_duration` ticks.
"""

from typing import Dict, List, Tuple
import matplotlib.pyplot as plt

from .counter import Counter
from ..utils.config import TrafficLightConfig, SimulatorConfig


class TrafficLight:
    """
    Representa el semáforo de una intersección.

    El estado del semáforo son dos contadores cíclicos:
    - duration_counter: ticks transcurridos del verde actual
    - indicator_counter: índice de la calle entrante con verde
    """

    def __init__(self, green_duration: int, num_incoming: int):
        """
        Inicializa un semáforo.

        Args:
            green_duration: Duración del verde en ticks (3-10)
            num_incoming: Número de calles entrantes del cruce (1-4)

        Raises:
            ValueError: Si la duración o el número de calles no son válidos
        """
        if green_duration < TrafficLightConfig.MIN_GREEN_DURATION:
            raise ValueError(f"the duration is not valid: {green_duration} "
                             f"(min: {TrafficLightConfig.MIN_GREEN_DURATION})")
        if green_duration > TrafficLightConfig.MAX_GREEN_DURATION:
            raise ValueError(f"the duration is not valid: {green_duration} "
                             f"(max: {TrafficLightConfig.MAX_GREEN_DURATION})")
        if not 1 <= num_incoming <= SimulatorConfig.MAX_STREETS_PER_NODE:
            raise ValueError(f"Número de calles entrantes inválido: {num_incoming}")

        self.green_duration = green_duration
        self.num_incoming = num_incoming

        self.duration_counter = Counter(green_duration)
        self.indicator_counter = Counter(num_incoming)

        # Estadísticas
        self.total_rotations = 0

    @property
    def green_index(self) -> int:
        """Índice (en orden de conexión) de la calle entrante con verde."""
        return self.indicator_counter.value

    def is_end_of_duration(self) -> bool:
        """True si el verde actual está en su último tick."""
        return self.duration_counter.is_at_limit()

    def rotate(self):
        """Pasa el verde a la siguiente calle entrante."""
        self.indicator_counter.advance()
        self.total_rotations += 1

    def advance_duration(self):
        self.duration_counter.advance()

    def get_state(self) -> Dict:
        """
        Retorna el estado actual del semáforo.

        Returns:
            dict: Índice con verde y tick dentro del verde actual
        """
        return {
            'green_index': self.green_index,
            'time_in_green': self.duration_counter.value,
            'green_duration': self.green_duration,
            'rotations': self.total_rotations
        }

    def get_schedule(self, ticks: int) -> List[int]:
        """
        Calcula qué calle entrante tendrá verde en cada uno de los próximos ticks.

        No modifica el estado del semáforo.

        Args:
            ticks: Número de ticks a proyectar

        Returns:
            Lista con el índice de la calle con verde en cada tick
        """
        duration = self.duration_counter.copy()
        indicator = self.indicator_counter.copy()

        schedule = []
        for _ in range(ticks):
            schedule.append(indicator.value)
            if duration.is_at_limit():
                indicator.advance()
            duration.advance()

        return schedule

    def visualize_schedule(self, ticks: int, figsize: Tuple[int, int] = (10, 3)) -> plt.Figure:
        """
        Dibuja la secuencia de verdes de los próximos ticks.

        Args:
            ticks: Número de ticks a dibujar
            figsize: Tamaño de la figura

        Returns:
            plt.Figure: Figura de matplotlib
        """
        schedule = self.get_schedule(ticks)
        fig, ax = plt.subplots(figsize=figsize)

        for tick, green_index in enumerate(schedule):
            ax.barh(green_index, 1, left=tick, height=0.6, color='green', alpha=0.7)

        ax.set_yticks(range(self.num_incoming))
        ax.set_yticklabels([f"Entrante {i}" for i in range(self.num_incoming)])
        ax.set_xlabel("Tick")
        ax.set_title(f"Verde cada {self.green_duration} ticks", fontsize=12, fontweight='bold')
        ax.grid(axis='x', alpha=0.3)

        plt.tight_layout()
        return fig

    def __str__(self) -> str:
        return f"TrafficLight(verde={self.green_index}, {self.duration_counter})"

    def __repr__(self) -> str:
        return (f"TrafficLight(duration={self.green_duration}, "
                f"incoming={self.num_incoming}, green_index={self.green_index})")


if __name__ == "__main__":
    # Ejemplo de uso
    print("=" * 70)
    print("EJEMPLO: Semáforo con 3 calles entrantes")
    print("=" * 70)

    light = TrafficLight(green_duration=3, num_incoming=3)
    print(f"\n{light!r}")
    print(f"Verdes de los próximos 12 ticks: {light.get_schedule(12)}")
