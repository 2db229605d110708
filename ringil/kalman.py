"""Constant-velocity Kalman filter over (cx, cy, aspect, height) boxes."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

_NDIM = 4


def _as_vector(values: Sequence[float] | np.ndarray, size: int) -> np.ndarray:
    vector = np.asarray(values, dtype=np.float64).reshape(-1)
    if vector.shape != (size,):
        raise ValueError(f"expected a vector of {size} values, got shape {vector.shape}")
    return vector


class KalmanFilter:
    """Kalman filter with an 8D state [x, y, a, h, vx, vy, va, vh] and a 4D measurement."""

    def __init__(self) -> None:
        self.motion_mat = np.eye(2 * _NDIM)
        self.motion_mat[:_NDIM, _NDIM:] = np.eye(_NDIM)
        self.update_mat = np.eye(_NDIM, 2 * _NDIM)
        self.std_weight_position = 1.0 / 20.0
        self.std_weight_velocity = 1.0 / 160.0

    def initiate(self, measurement: Sequence[float] | np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Initial mean and covariance from a first measurement."""
        measurement = _as_vector(measurement, _NDIM)
        mean = np.zeros(2 * _NDIM)
        mean[:_NDIM] = measurement
        h = measurement[3]
        pos = 2.0 * self.std_weight_position * h
        vel = 10.0 * self.std_weight_velocity * h
        std = np.array([pos, pos, 1e-2, pos, vel, vel, 1e-5, vel])
        return mean, np.diag(std**2)

    def predict(
        self, mean: Sequence[float] | np.ndarray, covariance: np.ndarray
    ) -> tuple[np.ndarray, np.ndarray]:
        """Advance one step: x' = Fx and P' = FPF^T + Q."""
        mean = _as_vector(mean, 2 * _NDIM)
        covariance = np.asarray(covariance, dtype=np.float64)
        h = mean[3]
        pos = self.std_weight_position * h
        vel = self.std_weight_velocity * h
        std = np.array([pos, pos, 1e-2, pos, vel, vel, 1e-5, vel])
        motion_cov = np.diag(std**2)

        new_mean = self.motion_mat @ mean
        new_cov = self.motion_mat @ covariance @ self.motion_mat.T + motion_cov
        new_cov = (new_cov + new_cov.T) * 0.5
        return new_mean, new_cov

    def update(
        self,
        mean: Sequence[float] | np.ndarray,
        covariance: np.ndarray,
        measurement: Sequence[float] | np.ndarray,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Correct with a measurement: x = x + Ky and P = P - KSK^T."""
        mean = _as_vector(mean, 2 * _NDIM)
        measurement = _as_vector(measurement, _NDIM)
        covariance = np.asarray(covariance, dtype=np.float64)

        projected_mean = self.update_mat @ mean
        projected_cov = self.update_mat @ covariance @ self.update_mat.T
        pos = self.std_weight_position * mean[3]
        std = np.array([pos, pos, 1e-1, pos])
        innovation_cov = projected_cov + np.diag(std**2)

        try:
            inv_innovation_cov = np.linalg.inv(innovation_cov)
        except np.linalg.LinAlgError:
            inv_innovation_cov = np.eye(_NDIM)

        kalman_gain = covariance @ self.update_mat.T @ inv_innovation_cov
        innovation = measurement - projected_mean

        new_mean = mean + kalman_gain @ innovation
        new_cov = covariance - kalman_gain @ innovation_cov @ kalman_gain.T
        new_cov = (new_cov + new_cov.T) * 0.5
        return new_mean, new_cov