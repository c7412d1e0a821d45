"""
Excepciones del simulador de tráfico.
"""


class TrafficError(Exception):
    """Error base del simulador."""

    PREFIX = "Error: "

    def __str__(self) -> str:
        return self.PREFIX + super().__str__()


class NetworkFormatError(TrafficError, ValueError):
    """La descripción de la red (cruces, calles o autos) no es válida."""


class CarNotFoundError(TrafficError, LookupError):
    """No existe ningún auto con el identificador consultado."""

    def __init__(self, car_id: int):
        super().__init__(f"There is no car with the identifier {car_id}.")
        self.car_id = car_id


class CommandError(TrafficError):
    """Comando mal formado o ejecutado antes de cargar una red."""
