"""Optimisation-control core: factor tables, convergence, learning-rate schedule."""

from .config import FactorizationConfig  # noqa: F401
from .controller import EpochUpdater, TrainingLoopController, TrainingResult  # noqa: F401
from .convergence import (  # noqa: F401
    CONVERGENCE_THRESHOLD,
    ConvergenceMonitor,
    ConvergenceStatus,
)
from .exceptions import (  # noqa: F401
    ConfigurationError,
    DivergenceError,
    MatrixFactorizationError,
)
from .factors import FactorPair, init_factor_table, setup_factors  # noqa: F401
from .learn_rate import LearnRateScheduler  # noqa: F401
from .state import TrainingState  # noqa: F401
