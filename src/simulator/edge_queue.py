"""
Cola ordenada de autos sobre una calle.

Este módulo implementa el algoritmo de seguimiento y adelantamiento
de autos dentro de una única calle. Los autos se mantienen ordenados
por posición descendente: el índice 0 es el auto más cercano al nodo
final (el "primer auto").
"""

from typing import Iterator, List, Optional

from .car import Car
from ..utils.config import SimulatorConfig

MIN_GAP = SimulatorConfig.MIN_GAP


class EdgeQueue:
    """
    Autos de una calle y su movimiento local.

    La lista se reordena (de forma estable) antes de cada consulta
    posicional, porque los movimientos pueden cambiar el orden.
    """

    def __init__(self, length: int, max_speed: int, overtaking_allowed: bool = False):
        """
        Inicializa la cola.

        Args:
            length: Longitud de la calle en metros
            max_speed: Velocidad máxima de la calle
            overtaking_allowed: True si la calle tiene carril de adelantamiento
        """
        self.length = length
        self.max_speed = max_speed
        self.overtaking_allowed = overtaking_allowed
        self.cars: List[Car] = []

    def place_initial_cars(self, cars: List[Car]):
        """
        Coloca los autos iniciales de la calle.

        El primer auto queda al final de la calle y cada uno de los
        siguientes MIN_GAP metros más atrás.

        Args:
            cars: Autos en el orden en que fueron declarados
        """
        for index, car in enumerate(cars):
            car.position = self.length - MIN_GAP * index
            self.cars.append(car)

    def sort(self):
        # sort() es estable también con reverse=True
        self.cars.sort(key=lambda car: car.position, reverse=True)

    def update_cars(self):
        """
        Actualiza posición y velocidad de los autos sin salir de la calle.

        Los autos ya actualizados en este tick se saltean; pueden aparecer
        en cualquier índice tras reordenar.
        """
        for i in range(len(self.cars)):
            self.sort()
            car = self.cars[i]

            if car.updated:
                continue

            car.mark_updated()
            current_position = car.position

            # Un auto parado al final de la calle no puede avanzar localmente
            if current_position == self.length:
                car.current_speed = 0
                continue

            speed = car.next_speed(self.max_speed)
            car.current_speed = speed

            if i == 0:
                car.position = min(current_position + speed, self.length)
                continue

            front_position = self.cars[i - 1].position
            if self.overtaking_allowed and self._try_overtake(i, car, speed, front_position):
                continue

            allowed_movement = front_position - MIN_GAP - current_position
            if allowed_movement <= 0:
                car.current_speed = 0
            else:
                car.position += min(allowed_movement, speed)

    def _try_overtake(self, i: int, car: Car, speed: int, front_position: int) -> bool:
        """
        Intenta que el auto i adelante al auto i - 1.

        Args:
            i: Índice del auto en la lista ordenada (i >= 1)
            car: Auto que intenta adelantar
            speed: Velocidad candidata del auto
            front_position: Posición del auto de adelante

        Returns:
            bool: True si el adelantamiento ocurrió (y el auto ya se movió)
        """
        current_position = car.position
        slack = current_position + speed - front_position - MIN_GAP

        if i == 1:
            # El auto adelantado debe estar lejos del final de la calle
            if slack >= 0 and self.length - front_position >= MIN_GAP:
                car.position = min(current_position + speed, self.length)
                return True
            return False

        limit = self.cars[i - 2].position
        if slack >= 0 and limit - front_position >= 2 * MIN_GAP:
            car.position = min(current_position + speed, limit - MIN_GAP)
            return True
        return False

    def first_car(self) -> Car:
        """Retorna el auto más cercano al final de la calle."""
        return self.cars[0]

    def first_car_speed(self) -> int:
        """Velocidad que tomaría el primer auto en este tick."""
        return self.cars[0].next_speed(self.max_speed)

    def update_first_car_speed(self):
        self.cars[0].current_speed = self.first_car_speed()

    def first_car_wished_distance(self) -> int:
        """
        Distancia que el primer auto desea recorrer más allá del final.

        Se calcula con la velocidad previa a la actualización local.

        Returns:
            int: Metros deseados sobre la próxima calle (<= 0 si no sale)
        """
        self.sort()
        return self.cars[0].position + self.first_car_speed() - self.length

    def is_first_car_at_end(self) -> bool:
        return self.cars[0].position == self.length

    def last_car_position(self) -> int:
        """
        Posición del auto más cercano al inicio de la calle.

        Returns:
            int: -1 si la calle está vacía
        """
        if not self.cars:
            return -1
        self.sort()
        return self.cars[-1].position

    def add_car(self, car: Car, wished_distance: int):
        """
        Agrega un auto que llega desde otra calle.

        Args:
            car: Auto reconstruido para esta calle
            wished_distance: Metros que el auto desea avanzar sobre la calle
        """
        if self.is_empty():
            car.position = wished_distance
        else:
            car.position = min(wished_distance, self.last_car_position() - MIN_GAP)

        # Se inserta detrás de los autos con posición mayor o igual
        index = len(self.cars)
        while index > 0 and self.cars[index - 1].position < car.position:
            index -= 1
        self.cars.insert(index, car)

    def remove_first_car(self) -> Car:
        return self.cars.pop(0)

    def get_car(self, car_id: int) -> Optional[Car]:
        """Retorna el auto con el ID dado, o None si no está en la calle."""
        for car in self.cars:
            if car.id == car_id:
                return car
        return None

    def reset(self):
        """Marca todos los autos como no actualizados."""
        for car in self.cars:
            car.reset()

    def all_updated(self) -> bool:
        return all(car.updated for car in self.cars)

    def is_empty(self) -> bool:
        return not self.cars

    def __len__(self) -> int:
        return len(self.cars)

    def __iter__(self) -> Iterator[Car]:
        return iter(self.cars)

    def __repr__(self) -> str:
        return (f"EdgeQueue(length={self.length}, max_speed={self.max_speed}, "
                f"overtaking={self.overtaking_allowed}, cars={len(self.cars)})")
