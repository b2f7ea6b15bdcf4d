"""
Quasi-Newton maxent trainer.

Minimizes the L2-penalized negative conditional log-likelihood with
scipy's L-BFGS-B. Every predicate gets a weight for every outcome.
"""

import numpy as np
from scipy import sparse
from scipy.optimize import minimize
from scipy.special import logsumexp

from maxentkit.indexing.base import IndexedCorpus
from maxentkit.model.context import Context
from maxentkit.model.qn import QNModel
from maxentkit.training.base import AbstractEventTrainer
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)


class _Cancelled(Exception):
    pass


def _feature_matrix(corpus: IndexedCorpus) -> sparse.csr_matrix:
    """Rows x predicates matrix of feature values (repeated predicates add up)."""
    indptr = [0]
    indices: list[int] = []
    data: list[float] = []
    for row, context in enumerate(corpus.contexts):
        indices.extend(context)
        data.extend(corpus.row_value(row, j) for j in range(len(context)))
        indptr.append(len(indices))
    matrix = sparse.csr_matrix(
        (data, indices, indptr),
        shape=(corpus.num_rows, corpus.num_predicates),
        dtype=np.float64,
    )
    matrix.sum_duplicates()
    return matrix


class QNTrainer(AbstractEventTrainer):
    """Trainer for maxent models using limited-memory BFGS."""

    ALGORITHM_NAMES = ("QN", "MAXENT_QN")

    def _do_train(self, corpus: IndexedCorpus) -> QNModel:
        settings = self._check_is_initialized()
        n_preds, n_outcomes = corpus.num_predicates, corpus.num_outcomes

        features = _feature_matrix(corpus)
        times_seen = np.asarray(corpus.num_times_seen, dtype=np.float64)
        targets = np.zeros((corpus.num_rows, n_outcomes), dtype=np.float64)
        targets[np.arange(corpus.num_rows), corpus.outcomes] = 1.0
        l2_cost = settings.l2_cost

        def objective(flat: np.ndarray) -> tuple[float, np.ndarray]:
            weights = flat.reshape(n_preds, n_outcomes)
            scores = features @ weights
            log_norm = logsumexp(scores, axis=1)
            log_probs = scores - log_norm[:, None]
            loss = -float(np.sum(times_seen * np.sum(targets * log_probs, axis=1)))
            residual = (np.exp(log_probs) - targets) * times_seen[:, None]
            grad = np.asarray(features.T @ residual)
            if l2_cost > 0.0:
                loss += l2_cost * float(np.dot(flat, flat))
                grad = grad + 2.0 * l2_cost * weights
            return loss, grad.ravel()

        state = {"x": np.zeros(n_preds * n_outcomes), "iteration": 0}

        def callback(xk: np.ndarray) -> None:
            state["iteration"] += 1
            state["x"] = np.array(xk, copy=True)
            loss, _ = objective(state["x"])
            log.info("QN iteration", iteration=state["iteration"], loss=loss)
            self._display(f"{state['iteration']}: loss={loss}")
            if self._cancelled():
                raise _Cancelled

        if self._cancelled():
            log.warning("Training cancelled", completed_iterations=0)
        else:
            try:
                result = minimize(
                    objective,
                    state["x"],
                    jac=True,
                    method="L-BFGS-B",
                    callback=callback,
                    options={"maxiter": settings.iterations, "maxcor": settings.memory},
                )
            except _Cancelled:
                log.warning(
                    "Training cancelled", completed_iterations=state["iteration"]
                )
            else:
                state["x"] = result.x
                log.info(
                    "L-BFGS finished",
                    converged=bool(result.success),
                    message=str(result.message),
                    n_iterations=int(result.nit),
                    loss=float(result.fun),
                )

        weights = state["x"].reshape(n_preds, n_outcomes)
        all_outcomes = list(range(n_outcomes))
        return QNModel(
            [Context(all_outcomes, weights[pid]) for pid in range(n_preds)],
            corpus.pred_labels,
            corpus.outcome_labels,
        )
