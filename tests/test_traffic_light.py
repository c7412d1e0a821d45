"""
Tests para el módulo de semáforos (TrafficLight).
"""

import pytest
import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.simulator.traffic_light import TrafficLight


class TestTrafficLight:
    """Tests para la clase TrafficLight."""

    def test_light_creation(self):
        """Test de creación de semáforo."""
        light = TrafficLight(green_duration=5, num_incoming=3)

        assert light.green_duration == 5
        assert light.num_incoming == 3
        assert light.green_index == 0
        assert not light.is_end_of_duration()

    def test_duration_validation(self):
        """Test de validación de duraciones."""
        # Muy corto
        with pytest.raises(ValueError):
            TrafficLight(2, 2)

        # Muy largo
        with pytest.raises(ValueError):
            TrafficLight(11, 2)

    def test_incoming_validation(self):
        """Test de validación del número de calles entrantes."""
        with pytest.raises(ValueError):
            TrafficLight(3, 0)

        with pytest.raises(ValueError):
            TrafficLight(3, 5)

    def test_end_of_duration(self):
        """Test de último tick del verde."""
        light = TrafficLight(3, 2)

        light.advance_duration()
        assert not light.is_end_of_duration()

        light.advance_duration()
        assert light.is_end_of_duration()

        light.advance_duration()
        assert not light.is_end_of_duration()

    def test_rotation(self):
        """Test de rotación del verde en orden de conexión."""
        light = TrafficLight(3, 3)

        indices = []
        for _ in range(4):
            light.rotate()
            indices.append(light.green_index)

        assert indices == [1, 2, 0, 1]
        assert light.total_rotations == 4

    def test_schedule(self):
        """Test de proyección de verdes."""
        light = TrafficLight(3, 2)

        schedule = light.get_schedule(8)

        assert schedule == [0, 0, 0, 1, 1, 1, 0, 0]
        # No modifica el estado
        assert light.green_index == 0
        assert light.duration_counter.value == 0

    def test_single_incoming_keeps_green(self):
        """Test de cruce con una sola calle entrante."""
        light = TrafficLight(3, 1)

        assert light.get_schedule(7) == [0] * 7

    def test_state_dict(self):
        """Test de diccionario de estado."""
        light = TrafficLight(4, 2)
        light.advance_duration()

        state = light.get_state()

        assert state['green_index'] == 0
        assert state['time_in_green'] == 1
        assert state['green_duration'] == 4

    def test_visualize_schedule(self):
        """Test de visualización de la secuencia de verdes."""
        light = TrafficLight(3, 2)

        fig = light.visualize_schedule(12)

        assert fig is not None
        plt.close(fig)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
