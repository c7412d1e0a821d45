"""
Sistema de métricas y análisis de resultados.

Este módulo proporciona funciones para calcular métricas a partir del
historial de fotos que guarda TrafficSimulator (record_history=True).
"""

from typing import Dict, List
import numpy as np
import pandas as pd


class MetricsCalculator:
    """
    Calculadora de métricas para simulaciones por ticks.

    Proporciona métodos estáticos que trabajan sobre el historial de
    fotos del simulador: [{'tick', 'cars': [...], 'green_edges': {...}}, ...].
    """

    @staticmethod
    def history_to_dataframe(history: List[Dict]) -> pd.DataFrame:
        """
        Convierte el historial en un DataFrame con una fila por auto y tick.

        Args:
            history: Historial de fotos del simulador

        Returns:
            pd.DataFrame: Columnas tick, car_id, edge_id, position, speed, ...
        """
        rows = []
        for snapshot in history:
            for car in snapshot['cars']:
                rows.append({'tick': snapshot['tick'], **car})

        columns = ['tick', 'car_id', 'edge_id', 'position', 'speed',
                   'wished_speed', 'accelerator', 'wished_direction']
        return pd.DataFrame(rows, columns=columns)

    @staticmethod
    def average_speed(history: List[Dict]) -> float:
        """
        Calcula la velocidad promedio de todos los autos en todos los ticks.

        Args:
            history: Historial de fotos del simulador

        Returns:
            float: Velocidad promedio en metros por tick
        """
        speeds = [car['speed'] for snapshot in history for car in snapshot['cars']]
        if not speeds:
            return 0.0
        return float(np.mean(speeds))

    @staticmethod
    def stopped_ratio(history: List[Dict]) -> float:
        """
        Fracción de observaciones (auto, tick) con velocidad 0.

        Args:
            history: Historial de fotos del simulador

        Returns:
            float: Ratio entre 0.0 y 1.0
        """
        speeds = np.array([car['speed'] for snapshot in history for car in snapshot['cars']])
        if speeds.size == 0:
            return 0.0
        return float(np.mean(speeds == 0))

    @staticmethod
    def edge_occupancy(history: List[Dict]) -> pd.DataFrame:
        """
        Número de autos por calle en cada tick.

        Returns:
            pd.DataFrame: Índice tick, una columna por calle
        """
        df = MetricsCalculator.history_to_dataframe(history)
        if df.empty:
            return pd.DataFrame()

        return (df.groupby(['tick', 'edge_id']).size()
                  .unstack(fill_value=0)
                  .sort_index())

    @staticmethod
    def green_light_share(history: List[Dict]) -> Dict[int, Dict[int, float]]:
        """
        Fracción de ticks en que cada calle entrante tuvo el verde.

        Args:
            history: Historial de fotos del simulador

        Returns:
            dict: {node_id: {edge_id: fracción de ticks con verde}}
        """
        if not history:
            return {}

        df = pd.DataFrame([snapshot['green_edges'] for snapshot in history])
        return {
            int(node_id): {int(edge_id): float(share)
                           for edge_id, share in df[node_id].value_counts(normalize=True).items()}
            for node_id in df.columns
        }

    @staticmethod
    def create_summary(history: List[Dict]) -> Dict:
        """
        Resume el historial en un diccionario de métricas.

        Returns:
            dict: Ticks, autos, velocidad promedio y ratio de detenidos
        """
        df = MetricsCalculator.history_to_dataframe(history)
        return {
            'ticks': len(history),
            'cars': int(df['car_id'].nunique()) if not df.empty else 0,
            'avg_speed': MetricsCalculator.average_speed(history),
            'stopped_ratio': MetricsCalculator.stopped_ratio(history),
            'max_speed_observed': int(df['speed'].max()) if not df.empty else 0
        }
