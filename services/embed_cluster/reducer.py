"""
Principal Component Reducer
Projects line embeddings onto their top principal components before clustering
"""

import numpy as np
import structlog

from shared.errors import ReductionError

logger = structlog.get_logger()


def reduce_with_pca(vectors, n_components: int) -> np.ndarray:
    """
    Project vectors onto their top principal components.

    The data is centered on the per-feature mean, the d x d covariance is
    eigendecomposed, and the centered rows are projected onto the
    eigenvectors with the largest eigenvalues.

    Eigenvectors are only defined up to sign, and equal eigenvalues have
    no canonical order; the stable sort below keeps numpy's order for ties,
    so the output is reproducible for a given numpy build but not unique.

    Args:
        vectors: Array-like of shape (n_samples, n_features)
        n_components: Requested output dimension; clamped to n_features

    Returns:
        numpy array of shape (n_samples, min(n_components, n_features))

    Raises:
        ReductionError: naming the precondition the input violates
    """
    if n_components < 1:
        raise ReductionError("n_components >= 1", f"got {n_components}")

    try:
        data = np.asarray(vectors, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ReductionError("rectangular numeric matrix", str(e)) from e

    if data.ndim == 1 and data.size == 0:
        raise ReductionError("n_samples >= 1", "no vectors given")
    if data.ndim != 2:
        raise ReductionError("rectangular numeric matrix", f"got {data.ndim}-D input")

    n_samples, n_features = data.shape
    if n_samples < 1:
        raise ReductionError("n_samples >= 1", "no vectors given")
    if n_features < 1:
        raise ReductionError("n_features >= 1", "vectors are empty")
    if not np.all(np.isfinite(data)):
        raise ReductionError("finite values", "input contains NaN or inf")

    k = min(n_components, n_features)

    centered = data - data.mean(axis=0)
    # Population covariance; the scale does not change the eigenvectors
    covariance = centered.T @ centered / n_samples

    eigenvalues, eigenvectors = np.linalg.eigh(covariance)
    order = np.argsort(-np.abs(eigenvalues), kind="stable")
    eigenvalues = eigenvalues[order]
    eigenvectors = eigenvectors[:, order]

    top = np.abs(eigenvalues[0])
    tolerance = top * max(n_features * np.finfo(np.float64).eps, 1e-10)
    rank = int(np.sum(np.abs(eigenvalues) > tolerance)) if top > 0 else 0
    if rank < k:
        raise ReductionError(
            "covariance rank >= n_components",
            f"rank {rank} < {k} (n_samples={n_samples}, n_features={n_features})",
        )

    reduced = centered @ eigenvectors[:, :k]
    logger.info(
        "PCA reduction complete",
        n_samples=n_samples,
        source_dims=n_features,
        dims=k,
        explained=round(float(eigenvalues[:k].sum() / eigenvalues.sum()), 4),
    )
    return reduced
