# metderive/__init__.py
from . import constants
from . import utils
from . import vpd
from . import wbgt
from . import humidity
from . import logging_utils

from .constants import HeatIndexAdjustment, HeatIndexFormula, RangeTest
from .vpd import calculate_vpd
from .wbgt import WBGTRecord, calculate_wbgt, compute_wbgt, wbgt_record
from .humidity import (
    DailyHumidity,
    calculate_rhx_rhave,
    relative_humidity_from_dewpoint,
)
from .main import DerivedQuantityProcessor
from .logging_utils import setup_logging

__version__ = "0.1.0"
