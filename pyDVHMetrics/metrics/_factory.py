"""Factory methods to manage available metric implementations."""

import warnings
import logging
from typing import Union, Type
from ._metric import Metric

METRICS = {}

logger = logging.getLogger(__name__)


def register_metric(metric_cls: Type[Metric]) -> None:
    """
    Register a new metric.

    Parameters
    ----------
    metric_cls : type
        A Metric class.
    """
    if not issubclass(metric_cls, Metric):
        raise ValueError("Metric must be a subclass of Metric.")

    if getattr(metric_cls, "name", None) is None:
        raise ValueError("Metric must have a 'name' attribute.")

    metric_name = metric_cls.name
    if metric_name in METRICS:
        warnings.warn(f"Metric '{metric_name}' is already registered.")
    else:
        METRICS[metric_name] = metric_cls


def get_available_metrics() -> dict[str, Type[Metric]]:
    """
    Get the available metrics.

    Returns
    -------
    dict
        Metric classes by name.
    """
    return METRICS


def get_metric(metric_desc: Union[dict, Metric]) -> Metric:
    """
    Returns a metric instance based on a descriptive parameter.

    Parameters
    ----------
    metric_desc : Union[dict, Metric]
        A dictionary with the metric name and its parameters or a metric
        instance

    Returns
    -------
    Metric
        A metric instance
    """
    if isinstance(metric_desc, dict):
        metric_desc = metric_desc.copy()
        metric_name = metric_desc.pop("name", None)
        if metric_name not in METRICS:
            raise ValueError(f"Invalid metric description: {metric_desc}")
        logger.debug("Creating metric '%s' with %s", metric_name, metric_desc)
        metric = METRICS[metric_name].model_validate(metric_desc)
    elif isinstance(metric_desc, Metric):
        metric = metric_desc
    else:
        raise ValueError(f"Invalid metric description: {metric_desc}")

    return metric
