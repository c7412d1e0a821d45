"""
Script de ejemplo: Simulación completa de la red de ejemplo

Este script demuestra cómo cargar una red desde archivos .sim,
simularla tick a tick, consultar autos y resumir métricas.
"""

import sys
from pathlib import Path

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.simulator import NetworkLoader, TrafficSimulator
from src.utils.config import DEMO_NETWORK_DIR, setup_logging
from src.utils.metrics import MetricsCalculator


def run_demo_simulation(ticks: int = 30):
    """
    Ejecuta la red de ejemplo durante `ticks` ticks.

    Returns:
        TrafficSimulator: Simulador al terminar
    """
    print("\n" + "=" * 70)
    print(f"SIMULACIÓN DE EJEMPLO - {ticks} ticks")
    print("=" * 70)

    network = NetworkLoader.from_directory(DEMO_NETWORK_DIR)
    simulator = TrafficSimulator(network, record_history=True)

    for tick in range(ticks):
        simulator.advance_one_tick()
        if tick % 10 == 9:
            print(f"\n[T={simulator.current_tick:3d}] {simulator.get_current_state()['occupancy']}")

    return simulator


def print_car_positions(simulator: TrafficSimulator, car_ids):
    print("\nPosiciones finales:")
    for car_id in car_ids:
        location = simulator.locate_car(car_id)
        if location is None:
            print(f"  Auto {car_id}: no encontrado")
        else:
            print(f"  Auto {car_id}: calle {location.edge_id}, "
                  f"velocidad {location.speed}, posición {location.position}")


def main():
    setup_logging()

    simulator = run_demo_simulation(ticks=30)
    print_car_positions(simulator, range(1, 6))

    summary = MetricsCalculator.create_summary(simulator.history)
    print("\nMétricas:")
    for key, value in summary.items():
        if isinstance(value, float):
            print(f"  {key:20s}: {value:.2f}")
        else:
            print(f"  {key:20s}: {value}")

    print("\nOcupación por calle (últimos 5 ticks):")
    print(MetricsCalculator.edge_occupancy(simulator.history).tail())


if __name__ == "__main__":
    main()
