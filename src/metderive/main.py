"""
Main processing driver for derived meteorological quantities.

This module coordinates the VPD, WBGT and relative humidity calculators over
tabular observations held in pandas DataFrames.
"""
import logging
from typing import Any, Dict, Optional

import pandas as pd

from .constants import ProcessingConfig, RangeTest
from .humidity import calculate_rhx_rhave, relative_humidity_from_dewpoint
from .utils import count_non_finite
from .vpd import calculate_vpd
from .wbgt import calculate_wbgt

logger = logging.getLogger(__name__)


class DerivedQuantityProcessor:
    """Main class for computing derived quantities from observation tables"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize processor with configuration.

        Args:
            config: Dictionary containing processing configuration
        """
        self.config = config or {}
        self.initialize_parameters()

    def initialize_parameters(self) -> None:
        """Initialize processing parameters from the configuration"""
        self.range_test = RangeTest(
            self.config.get('range_test', ProcessingConfig.RANGE_TEST)
        )

        self.hours_per_day = self.config.get(
            'hours_per_day', ProcessingConfig.HOURS_PER_DAY
        )
        if self.hours_per_day != ProcessingConfig.HOURS_PER_DAY:
            raise ValueError(
                f"hours_per_day must be {ProcessingConfig.HOURS_PER_DAY}, "
                f"got {self.hours_per_day}"
            )

        # Column names
        self.columns = {
            name: self.config.get(f'{name}_column', default)
            for name, default in ProcessingConfig.COLUMNS.items()
        }

        log_level = self.config.get('log_level')
        if log_level is not None:
            logging.getLogger('metderive').setLevel(log_level.upper())

    def process_daily(self, frame: pd.DataFrame) -> pd.DataFrame:
        """
        Add VPD, heat index and WBGT columns to daily observations.

        Args:
            frame: DataFrame with daily tmax (°C), tmin (°C) and rh (%) columns

        Returns:
            Copy of ``frame`` with ``vpd``, ``hi`` and ``wbgt`` columns
        """
        tmax = frame[self.columns['tmax']].to_numpy(dtype=float)
        tmin = frame[self.columns['tmin']].to_numpy(dtype=float)
        rh = frame[self.columns['rh']].to_numpy(dtype=float)

        logger.info(f"Processing {len(frame)} daily records")

        result = frame.copy()
        result['vpd'] = calculate_vpd(tmax, tmin, rh)

        wbgt = calculate_wbgt(tmax, rh, self.range_test)
        result['hi'] = wbgt['hi']
        result['wbgt'] = wbgt['wbgt']

        self._log_non_finite(result, ['vpd', 'hi', 'wbgt'])
        return result

    def process_dewpoint(self, frame: pd.DataFrame) -> pd.DataFrame:
        """
        Add relative humidity derived from dewpoint and pressure.

        Args:
            frame: DataFrame with tdew (°C), pressure (Pa) and Kelvin
                tmax/tmin columns

        Returns:
            Copy of ``frame`` with an ``rh_dewpoint`` column
        """
        logger.info(f"Processing {len(frame)} dewpoint/pressure records")

        result = frame.copy()
        result['rh_dewpoint'] = relative_humidity_from_dewpoint(
            frame[self.columns['tdew']].to_numpy(dtype=float),
            frame[self.columns['pressure']].to_numpy(dtype=float),
            frame[self.columns['tmax']].to_numpy(dtype=float),
            frame[self.columns['tmin']].to_numpy(dtype=float),
        )

        self._log_non_finite(result, ['rh_dewpoint'])
        return result

    def process_hourly(
        self,
        hourly: pd.DataFrame,
        daily: pd.DataFrame
    ) -> pd.DataFrame:
        """
        Compute daily RHx and RHave from hourly observations.

        Args:
            hourly: Chronological hourly DataFrame with ta and tdew columns
                (°C), 24 rows per day
            daily: DataFrame with one row per day holding tmax and tmin (°C)

        Returns:
            DataFrame indexed like ``daily`` with ``rhx`` and ``rhave`` (%)
        """
        logger.info(
            f"Processing {len(hourly)} hourly records over {len(daily)} days"
        )

        humidity = calculate_rhx_rhave(
            hourly[self.columns['ta']].to_numpy(dtype=float),
            hourly[self.columns['tdew']].to_numpy(dtype=float),
            daily[self.columns['tmax']].to_numpy(dtype=float),
            daily[self.columns['tmin']].to_numpy(dtype=float),
        )

        result = humidity.to_frame(index=daily.index)
        self._log_non_finite(result, ['rhx', 'rhave'])
        return result

    def _log_non_finite(self, frame: pd.DataFrame, columns) -> None:
        for column in columns:
            n_bad = count_non_finite(frame[column].to_numpy(dtype=float))
            if n_bad:
                logger.warning(f"{n_bad} non-finite values in '{column}'")
