"""Similarity alignment of landmark sets and nearest-neighbour image warping."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def umeyama(src: Sequence[Sequence[float]], dst: Sequence[Sequence[float]]) -> np.ndarray:
    """Least-squares similarity transform (3x3) mapping src points onto dst points."""
    src_pts = np.asarray(src, dtype=np.float64).reshape(-1, 2)
    dst_pts = np.asarray(dst, dtype=np.float64).reshape(-1, 2)
    if src_pts.shape != dst_pts.shape or len(src_pts) == 0:
        raise ValueError("point sets must be non-empty and of equal length")
    count = len(src_pts)

    src_mean = src_pts.mean(axis=0)
    dst_mean = dst_pts.mean(axis=0)
    src_demean = (src_pts - src_mean).T
    dst_demean = (dst_pts - dst_mean).T

    a = dst_demean @ src_demean.T / count
    u, singular_values, v_t = np.linalg.svd(a)

    d = np.array([1.0, 1.0])
    if np.linalg.det(a) < 0.0:
        d[1] = -1.0

    rank = np.linalg.matrix_rank(a, tol=1e-5)
    if rank == 0:
        raise ValueError("collinear points, cannot compute transformation")

    if rank == 1:
        if np.linalg.det(u) * np.linalg.det(v_t) > 0.0:
            t = u @ v_t
        else:
            t = u @ np.diag([d[0], -1.0]) @ v_t
    else:
        t = u @ np.diag(d) @ v_t

    variance = src_demean.var(axis=1).sum()
    scale = float(d @ singular_values) / variance

    t_scale = t * scale
    trans = dst_mean - t_scale @ src_mean

    matrix = np.eye(3)
    matrix[:2, :2] = t_scale
    matrix[:2, 2] = trans
    return matrix


def warp_into(image: np.ndarray, matrix: np.ndarray, size: int) -> np.ndarray:
    """Sample a size x size image whose pixel p takes image[inverse(matrix) p].

    Pixels that map outside the source stay zero.
    """
    source = np.asarray(image)
    if source.ndim < 2:
        raise ValueError("image must have at least two dimensions")
    try:
        inverse = np.linalg.inv(np.asarray(matrix, dtype=np.float64))
    except np.linalg.LinAlgError as exc:
        raise ValueError("transformation matrix must be invertible") from exc

    in_height, in_width = source.shape[:2]
    output = np.zeros((size, size) + source.shape[2:], dtype=source.dtype)

    out_y, out_x = np.mgrid[0:size, 0:size]
    points = np.stack([out_x.ravel(), out_y.ravel(), np.ones(size * size)]).astype(np.float64)
    mapped = inverse @ points
    in_x = np.trunc(mapped[0])
    in_y = np.trunc(mapped[1])

    valid = (in_x >= 0) & (in_x < in_width) & (in_y >= 0) & (in_y < in_height)
    oy = out_y.ravel()[valid]
    ox = out_x.ravel()[valid]
    output[oy, ox] = source[in_y[valid].astype(int), in_x[valid].astype(int)]
    return output