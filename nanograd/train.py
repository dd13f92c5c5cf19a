"""
Minimal training helpers: mean squared error, a plain gradient-descent step,
and a central-difference gradient for checking the engine numerically.
"""

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from nanograd import config
from nanograd.engine import Value
from nanograd.nn import MLP, Module

logger = logging.getLogger(__name__)


def mse_loss(preds: Sequence[Value], targets: Sequence[Value]) -> Value:
    if len(preds) != len(targets):
        raise ValueError(f"Prediction/target length mismatch: {len(preds)} vs {len(targets)}")
    if not preds:
        raise ValueError("mse_loss needs at least one prediction")
    total = sum((yp - yt) ** 2 for yp, yt in zip(preds, targets))
    return total * (1.0 / len(preds))


def sgd_step(params: Iterable[Value], lr: float) -> None:
    for p in params:
        p.update(lr)


def train_step(model: Module, xs: List[List[Value]], ys: List[Value], lr: Optional[float] = None) -> float:
    """
    One full-batch gradient descent step on a single-output model.
    Returns the loss before the update.
    """
    lr = config.learning_rate() if lr is None else lr

    # Forward pass
    ypred = [model(x)[0] for x in xs]
    loss = mse_loss(ypred, ys)

    model.zero_grad()
    loss.backward()
    sgd_step(model.parameters(), lr)

    logger.debug("train step: loss=%.6f lr=%g", loss.data, lr)
    return loss.data


def numerical_gradient(f: Callable[[float], float], x: float, h: float = 1e-5) -> float:
    # Central difference
    return (f(x + h) - f(x - h)) / (2 * h)


if __name__ == "__main__":
    config.configure_logging("INFO")

    # Learn y = x1 + x2 on the four corners of the unit square
    model = MLP(2, [16, 16, 1])
    xs = [[Value(0.0), Value(0.0)], [Value(0.0), Value(1.0)], [Value(1.0), Value(0.0)], [Value(1.0), Value(1.0)]]
    ys = [Value(0.0), Value(1.0), Value(1.0), Value(2.0)]

    for epoch in range(100):
        loss = train_step(model, xs, ys)
        if epoch % 10 == 0:
            logger.info("Epoch %d: loss = %.6f", epoch, loss)

    for x, y in zip(xs, ys):
        pred = model(x)[0]
        logger.info("Input: [%.1f, %.1f] -> predicted %.4f, expected %.1f", x[0].data, x[1].data, pred.data, y.data)
