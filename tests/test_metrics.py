"""
Tests para el cálculo de métricas sobre el historial del simulador.
"""

import pytest
import sys
from pathlib import Path

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.simulator import NetworkLoader, TrafficSimulator
from src.utils.config import DEMO_NETWORK_DIR
from src.utils.metrics import MetricsCalculator


def run_demo(ticks):
    network = NetworkLoader.from_directory(DEMO_NETWORK_DIR)
    simulator = TrafficSimulator(network, record_history=True)
    simulator.run(ticks)
    return simulator.history


class TestMetricsCalculator:
    """Tests para MetricsCalculator."""

    def test_history_to_dataframe(self):
        """Test de una fila por auto y tick."""
        df = MetricsCalculator.history_to_dataframe(run_demo(10))

        assert len(df) == 50
        assert sorted(df['car_id'].unique()) == [1, 2, 3, 4, 5]
        assert df['tick'].min() == 1
        assert df['tick'].max() == 10
        assert 'edge_id' in df.columns

    def test_empty_history(self):
        """Test de historial vacío."""
        assert MetricsCalculator.average_speed([]) == 0.0
        assert MetricsCalculator.stopped_ratio([]) == 0.0
        assert MetricsCalculator.edge_occupancy([]).empty
        assert MetricsCalculator.green_light_share([]) == {}

        summary = MetricsCalculator.create_summary([])
        assert summary['ticks'] == 0
        assert summary['cars'] == 0

    def test_average_speed_and_stopped_ratio(self):
        """Test sobre un historial armado a mano."""
        history = [
            {'tick': 1, 'green_edges': {},
             'cars': [{'car_id': 1, 'edge_id': 0, 'position': 10, 'speed': 10},
                      {'car_id': 2, 'edge_id': 0, 'position': 0, 'speed': 0}]},
            {'tick': 2, 'green_edges': {},
             'cars': [{'car_id': 1, 'edge_id': 0, 'position': 30, 'speed': 20},
                      {'car_id': 2, 'edge_id': 0, 'position': 0, 'speed': 0}]},
        ]

        assert MetricsCalculator.average_speed(history) == pytest.approx(7.5)
        assert MetricsCalculator.stopped_ratio(history) == pytest.approx(0.5)

    def test_edge_occupancy(self):
        """Test de que la ocupación total coincide con la cantidad de autos."""
        occupancy = MetricsCalculator.edge_occupancy(run_demo(10))

        assert len(occupancy) == 10
        assert (occupancy.sum(axis=1) == 5).all()

    def test_green_light_share(self):
        """Test de reparto del verde en el cruce 2."""
        share = MetricsCalculator.green_light_share(run_demo(6))

        assert list(share) == [2]
        assert share[2][0] == pytest.approx(0.5)
        assert share[2][1] == pytest.approx(0.5)

    def test_create_summary(self):
        """Test de resumen de métricas."""
        summary = MetricsCalculator.create_summary(run_demo(20))

        assert summary['ticks'] == 20
        assert summary['cars'] == 5
        assert 0.0 <= summary['stopped_ratio'] <= 1.0
        assert 0 < summary['max_speed_observed'] <= 40
        assert summary['avg_speed'] <= summary['max_speed_observed']


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
