"""
Configuración global del simulador de tráfico.

Este módulo contiene todas las constantes y parámetros de configuración
utilizados en el proyecto: rutas de datos, reglas de la red vial,
rangos válidos de autos y semáforos, y el logging.
"""

import logging
from pathlib import Path
from typing import Optional

# Rutas del proyecto
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
NETWORKS_DIR = DATA_DIR / "networks"

# Red de ejemplo
DEMO_NETWORK_DIR = NETWORKS_DIR / "demo"


# Parámetros del simulador
class SimulatorConfig:
    """Reglas generales del motor de simulación."""

    # Distancia mínima entre dos autos de la misma calle (metros)
    MIN_GAP = 10

    # Un auto elige salida con un contador cíclico de período 4
    DIRECTION_PERIOD = 4

    # Máximo de calles entrantes / salientes por cruce
    MAX_STREETS_PER_NODE = 4

    # Los números se leen como enteros de 32 bits con signo
    MAX_INTEGER = 2 ** 31 - 1

    # Archivos que describen una red
    CROSSINGS_FILE = "crossings.sim"
    STREETS_FILE = "streets.sim"
    CARS_FILE = "cars.sim"


class CarConfig:
    """Rangos válidos de los autos."""

    MIN_WISHED_SPEED = 20  # m/tick
    MAX_WISHED_SPEED = 40  # m/tick
    MIN_ACCELERATOR = 1
    MAX_ACCELERATOR = 10


class StreetConfig:
    """Rangos válidos de las calles."""

    MIN_LENGTH = 10  # metros
    MAX_LENGTH = 10000  # metros
    MIN_SPEED_LIMIT = 5  # m/tick
    MAX_SPEED_LIMIT = 40  # m/tick

    # Códigos de tipo de carril en streets.sim
    SIMPLE_LANE_CODE = 1
    PASSING_LANE_CODE = 2


# Parámetros de semáforos
class TrafficLightConfig:
    """Configuración de semáforos."""

    MIN_GREEN_DURATION = 3  # ticks
    MAX_GREEN_DURATION = 10  # ticks


# Logging
class LoggingConfig:
    """Configuración de logging."""

    LOG_LEVEL = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE: Optional[Path] = None


def setup_logging(level: Optional[str] = None, log_file: Optional[Path] = None):
    """
    Configura el logging del proyecto a partir de LoggingConfig.

    Args:
        level: Nivel de log (por defecto LoggingConfig.LOG_LEVEL)
        log_file: Archivo de log opcional; si es None se usa stderr
    """
    log_file = log_file or LoggingConfig.LOG_FILE
    handlers = [logging.FileHandler(log_file)] if log_file else [logging.StreamHandler()]

    logging.basicConfig(
        level=getattr(logging, (level or LoggingConfig.LOG_LEVEL).upper()),
        format=LoggingConfig.LOG_FORMAT,
        handlers=handlers,
        force=True
    )


if __name__ == "__main__":
    print(f"Directorio del proyecto: {PROJECT_ROOT}")
    print(f"Directorio de redes: {NETWORKS_DIR}")
    print(f"Red de ejemplo: {DEMO_NETWORK_DIR}")
