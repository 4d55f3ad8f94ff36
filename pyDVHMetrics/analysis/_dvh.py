import logging
from typing import Union, Optional, Any, Iterable
from typing_extensions import Self
from pydantic import (
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from numpydantic import NDArray, Shape

import pint
import numpy as np
import SimpleITK as sitk
import matplotlib.pyplot as plt

from pyDVHMetrics.core import PyDVHMetricsBaseModel

logger = logging.getLogger(__name__)

ureg = pint.UnitRegistry()


class DvhSample(PyDVHMetricsBaseModel):
    """
    A single point of a cumulative DVH.

    Attributes
    ----------
    volume : float
        Cumulative volume in percent of the structure volume receiving at
        least ``dose``.
    dose : float
        Absolute dose value.
    """

    model_config = ConfigDict(frozen=True)

    volume: float = Field(ge=0.0, le=100.0, allow_inf_nan=False)
    dose: float = Field(ge=0.0, allow_inf_nan=False)


class DvhCurve(PyDVHMetricsBaseModel):
    """
    Cumulative Dose Volume Histogram (DVH) curve.

    The curve is an ordered sequence of (cumulative volume [%], dose) samples.
    By convention the first sample is the 100 % / zero dose anchor and the
    volume decreases as the dose increases. The order of the samples is kept
    exactly as given and the curve cannot be modified after construction.

    Note
    ----
    A curve without samples (or with only the anchor sample) is a valid
    curve. Metrics computed from it are reported as not computable.
    """

    model_config = ConfigDict(frozen=True)

    volume: NDArray[Shape["*"], np.float64] = Field(
        alias="volumePoints", description="Cumulative volume percentages for each sample"
    )
    dose: NDArray[Shape["*"], np.float64] = Field(
        alias="dosePoints", description="Absolute dose for each sample"
    )

    unit: pint.Unit = Field(default=ureg.gray, description="Unit of the dose values")
    name: str = Field(default="DVH", description="Name of the DVH")

    @field_validator("volume", "dose", mode="before")
    @classmethod
    def validate_points(cls, v: Any) -> np.ndarray:
        """
        Copy the sample values into a read-only float64 array.

        Parameters
        ----------
        v : Any
            Array-like sample values.

        Returns
        -------
        np.ndarray
            One-dimensional float64 array that cannot be written to.
        """
        v = np.array(v, dtype=np.float64)
        if v.ndim != 1:
            raise ValueError("DVH samples must be given as one-dimensional sequences.")
        if not np.all(np.isfinite(v)):
            raise ValueError("DVH samples must be finite.")
        v.setflags(write=False)
        return v

    @field_validator("unit", mode="before")
    @classmethod
    def validate_unit(cls, v: Any) -> pint.Unit:
        """
        Validate the unit of the dose values.

        Parameters
        ----------
        v : Any
            The unit to validate.

        Returns
        -------
            pint.Unit: Validated unit of the dose values.
        """

        if isinstance(v, pint.Unit):
            return v

        try:
            return ureg.Unit(v)
        except (pint.UndefinedUnitError, ValueError, TypeError) as exc:
            raise ValueError(f"Invalid unit: {v}") from exc

    @model_validator(mode="after")
    def check_samples(self) -> Self:
        """
        Validate the DVH samples.

        Volumes have to lie within [0, 100] %, doses must not be negative and
        the cumulative volume must not increase while the dose must not
        decrease along the curve.

        Returns
        -------
            DvhCurve: The curve itself if validation passes.
        """
        if self.volume.size != self.dose.size:
            raise ValueError("volume and dose must contain the same number of samples.")

        if np.any(self.volume < 0.0) or np.any(self.volume > 100.0):
            raise ValueError("Cumulative volume must be within [0, 100] percent.")

        if np.any(self.dose < 0.0):
            raise ValueError("Dose values must not be negative.")

        if np.any(np.diff(self.volume) > 0.0):
            raise ValueError(
                "Cumulative volume must not increase from one sample to the next. Supply the "
                "samples in the order of the cumulative DVH (decreasing volume)."
            )

        if np.any(np.diff(self.dose) < 0.0):
            raise ValueError(
                "Dose must not decrease from one sample to the next. Supply the samples in "
                "the order of the cumulative DVH (increasing dose)."
            )

        self.volume.setflags(write=False)
        self.dose.setflags(write=False)
        return self

    @classmethod
    def from_samples(
        cls, samples: Iterable[Union[DvhSample, tuple[float, float]]], **kwargs
    ) -> Self:
        """
        Create a curve from a sequence of samples.

        Parameters
        ----------
        samples : Iterable[Union[DvhSample, tuple[float, float]]]
            Samples as DvhSample objects or (volume, dose) tuples.
        **kwargs:
            Additional arguments passed to the DvhCurve model.

        Returns
        -------
            DvhCurve: curve holding the samples in the given order.
        """
        points = [
            s if isinstance(s, DvhSample) else DvhSample(volume=s[0], dose=s[1])
            for s in samples
        ]
        return cls(
            volume=[p.volume for p in points],
            dose=[p.dose for p in points],
            **kwargs,
        )

    @computed_field
    @property
    def num_points(self) -> int:
        """
        Get the number of samples in the DVH.

        Returns
        -------
            int: Number of samples
        """
        return int(self.volume.size)

    @property
    def samples(self) -> tuple[DvhSample, ...]:
        """tuple[DvhSample, ...]: The samples of the curve in their original order."""
        return tuple(
            DvhSample(volume=v, dose=d) for v, d in zip(self.volume.tolist(), self.dose.tolist())
        )

    @property
    def cumulative(self) -> np.ndarray:
        """
        Get the cumulative DVH as array.

        Gives a 2xnum_points array with the first row being the dose
        and the second row being the cumulative volume percentages.
        """
        return np.vstack((self.dose, self.volume))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, DvhCurve):
            return NotImplemented
        return (
            self.name == other.name
            and self.unit == other.unit
            and np.array_equal(self.volume, other.volume)
            and np.array_equal(self.dose, other.dose)
        )

    def __hash__(self) -> int:
        return hash((self.name, str(self.unit), self.volume.tobytes(), self.dose.tobytes()))

    def dose_at_volume(self, volume: float) -> float:
        """
        Get the dose of the first sample covering at most the given volume.

        Parameters
        ----------
        volume : float
            The cumulative volume percentage to look up (e.g. 2 for D2).

        Returns
        -------
            float: Dose of the first sample with cumulative volume <= volume,
            NaN if no such sample exists.
        """
        idx = np.flatnonzero(self.volume <= volume)
        if idx.size == 0:
            return np.nan
        return float(self.dose[idx[0]])

    @classmethod
    def compute(
        cls,
        quantity: Union[sitk.Image, NDArray],
        mask: Optional[Union[sitk.Image, NDArray]] = None,
        bin_width: float = 0.1,
        max_value: Optional[float] = None,
        **kwargs,
    ) -> Self:
        """
        Create a cumulative DVH from a dose distribution and mask.

        Parameters
        ----------
        quantity : Union[sitk.Image, NDArray]
            The dose distribution. Can be a SimpleITK image or a numpy array.
        mask : Optional[Union[sitk.Image, NDArray]], optional
            The mask of the structure. If None, the whole image / array will be used.
            If provided, it must have the same shape as the quantity.
            Defaults to None.
        bin_width : float, optional
            Dose spacing between samples. Defaults to 0.1.
        max_value : Optional[float], optional
            Highest dose sample. If None, the curve runs until the first dose
            value no voxel reaches.
        **kwargs:
            Additional arguments passed to the DvhCurve model.

        Returns
        -------
            DvhCurve: Cumulative curve starting at the 100 % / zero dose anchor.
        """
        if bin_width <= 0.0:
            raise ValueError("bin_width must be positive.")

        if isinstance(quantity, sitk.Image):
            quantity = sitk.GetArrayFromImage(quantity)
        quantity = np.asarray(quantity)

        if mask is not None:
            if isinstance(mask, sitk.Image):
                mask = sitk.GetArrayFromImage(mask)
            mask = np.asarray(mask)

            if mask.shape != quantity.shape:
                raise ValueError("Mask must have the same shape as the quantity.")

            q_array = quantity[mask.astype(bool)]
        else:
            q_array = quantity.ravel()

        if q_array.size == 0:
            logger.warning("Structure '%s' is empty, DVH has no samples.", kwargs.get("name"))
            return cls(volume=[], dose=[], **kwargs)

        q_sorted = np.sort(q_array.astype(np.float64))
        if max_value is None:
            max_value = q_sorted[-1] + bin_width

        # rounding keeps doses on bin edges exact, e.g. 3 * 0.1 == 0.3
        doses = np.round(np.arange(0, int(np.ceil(max_value / bin_width)) + 1) * bin_width, 10)
        num_at_least = q_sorted.size - np.searchsorted(q_sorted, doses, side="left")
        volumes = num_at_least / q_sorted.size * 100.0

        return cls(volume=volumes, dose=doses, **kwargs)

    def plot(self, ax=None, line_width=2, plot_legend=True, **kwargs):
        """Plot the DVH curve.

        Parameters
        ----------
        ax : matplotlib.axes.Axes, optional
            Axes to plot on. If None, creates new figure and axes. Defaults to None.
        line_width : float, optional
            Width of the plotted lines. Defaults to 2.
        plot_legend : bool, optional
            Whether to show the legend. Defaults to True.
        **kwargs:
            Additional arguments passed to matplotlib's plot function.

        Returns
        -------
            matplotlib.axes.Axes: The axes containing the plot
        """
        if ax is None:
            _, ax = plt.subplots()

        if plot_legend:
            ax.plot(self.dose, self.volume, linewidth=line_width, label=self.name, **kwargs)
        else:
            ax.plot(self.dose, self.volume, linewidth=line_width, **kwargs)

        ax.set_xlabel(f"Dose [{self.unit:~P}]")
        ax.set_ylabel("Volume [%]")
        if plot_legend:
            ax.legend()

        if self.num_points > 0:
            ax.set_xlim(0, np.max(self.dose) * 1.05)
        ax.set_ylim(0, 105)

        return ax
