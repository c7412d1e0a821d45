"""
Contador cíclico acotado.

Es la pieza básica tanto de la elección de salida de los autos
como de la temporización de los semáforos.
"""


class Counter:
    """
    Contador cíclico sobre los enteros [0, limit - 1].

    Al avanzar desde limit - 1 vuelve a 0.
    """

    def __init__(self, limit: int, value: int = 0):
        """
        Inicializa el contador.

        Args:
            limit: Cota que el contador nunca alcanza (el máximo es limit - 1)
            value: Valor inicial

        Raises:
            ValueError: Si el límite o el valor inicial no son válidos
        """
        if limit < 1:
            raise ValueError(f"Límite de contador inválido: {limit} (mín: 1)")
        if not 0 <= value < limit:
            raise ValueError(f"Valor inicial fuera de rango: {value} (límite: {limit})")

        self.limit = limit
        self.value = value

    def advance(self):
        """Avanza una unidad, volviendo a 0 si estaba en el máximo."""
        if self.value >= self.limit - 1:
            self.value = 0
        else:
            self.value += 1

    def is_at_limit(self) -> bool:
        """True si el contador está en su último valor (limit - 1)."""
        return self.value == self.limit - 1

    def copy(self) -> 'Counter':
        return Counter(self.limit, self.value)

    def __str__(self) -> str:
        return f"{self.value}/{self.limit}"

    def __repr__(self) -> str:
        return f"Counter(limit={self.limit}, value={self.value})"
