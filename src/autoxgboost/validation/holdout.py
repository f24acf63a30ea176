"""
Holdout Split for Early Stopping
================================

The rows of a task are split once, up front, into a training part and an
early-stopping part. Every candidate configuration is trained on the
training part, monitored on the early-stopping part and evaluated there.
"""

from typing import Optional, Tuple

import numpy as np
import pandas as pd
from loguru import logger
from sklearn.model_selection import train_test_split

from ..exceptions import InvalidArgumentError
from ..tasks import Task, TaskType


def make_holdout_split(
    task: Task,
    split: float = 4 / 5,
    random_state: Optional[int] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split the rows of a task into training and early-stopping positions.

    Args:
        task: The task to split
        split: Share of rows used for training, the rest is the early-stopping set
        random_state: Seed for the shuffle

    Returns:
        (train_index, early_stopping_index) as sorted positional arrays
    """

    n = task.size
    n_train = int(round(n * split))
    if n_train < 1 or n_train >= n:
        raise InvalidArgumentError(
            f"A holdout split of {split:.3f} on {n} observations leaves the training "
            f"or the early-stopping part empty"
        )

    positions = np.arange(n)
    stratify = None
    if task.task_type == TaskType.CLASSIFICATION:
        counts = task.y.value_counts()
        n_test = n - n_train
        # stratification needs two rows per class and room for every class on both sides
        if counts.min() >= 2 and min(n_train, n_test) >= len(counts):
            stratify = task.y.to_numpy()
        else:
            train_index, early_stopping_index = _split_keeping_classes(
                task.y.to_numpy(dtype=object), n_train, random_state
            )
            logger.debug(
                f"📊 Holdout split: train size {len(train_index)}, "
                f"early stopping size {len(early_stopping_index)} (every class in training)"
            )
            return train_index, early_stopping_index

    train_index, early_stopping_index = train_test_split(
        positions,
        train_size=n_train,
        random_state=random_state,
        shuffle=True,
        stratify=stratify,
    )

    logger.debug(
        f"📊 Holdout split: train size {len(train_index)}, "
        f"early stopping size {len(early_stopping_index)}"
        + (" (stratified)" if stratify is not None else "")
    )

    return np.sort(train_index), np.sort(early_stopping_index)


def _split_keeping_classes(
    y: np.ndarray,
    n_train: int,
    random_state: Optional[int],
) -> Tuple[np.ndarray, np.ndarray]:
    """Shuffled split with one row of every class forced into the training part."""
    rng = np.random.RandomState(random_state)
    order = rng.permutation(len(y))

    # first occurrence of each class in the shuffled order
    _, first = np.unique(pd.Series(y[order]).astype(str).to_numpy(), return_index=True)
    anchors = order[first]
    rest = order[~np.isin(order, anchors)]

    n_fill = max(n_train - len(anchors), 0)
    train_index = np.concatenate([anchors, rest[:n_fill]])
    early_stopping_index = rest[n_fill:]
    if len(early_stopping_index) == 0:
        raise InvalidArgumentError(
            f"{len(anchors)} classes on {len(y)} observations leave no rows for early stopping"
        )

    return np.sort(train_index), np.sort(early_stopping_index)
