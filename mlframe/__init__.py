"""
mlframe - storage-backed dataframes and a shared model lifecycle
for statistical learning algorithms
"""

__version__ = "0.1.0"

from mlframe.data import Dataframe, DataType, Record, parse_csv, parse_text_files
from mlframe.exceptions import (
    DataframeDeletedError,
    DataframeError,
    DatasetIOError,
    KnowledgeBaseError,
    MLFrameError,
    ModelNotTrainedError,
    RecordIndexError,
    UnsupportedOperationError,
)
from mlframe.models import (
    BaseMLModel,
    KnowledgeBase,
    ModelParameters,
    ModelState,
    TrainingParameters,
    ValidationMetrics,
)
from mlframe.storage import (
    DatabaseConfiguration,
    InMemoryConfiguration,
    RedisConfiguration,
    StorageConnector,
    build_configuration,
)

__all__ = [
    "__version__",
    # Data
    "Dataframe",
    "DataType",
    "Record",
    "parse_csv",
    "parse_text_files",
    # Models
    "BaseMLModel",
    "KnowledgeBase",
    "ModelParameters",
    "ModelState",
    "TrainingParameters",
    "ValidationMetrics",
    # Storage
    "DatabaseConfiguration",
    "InMemoryConfiguration",
    "RedisConfiguration",
    "StorageConnector",
    "build_configuration",
    # Errors
    "MLFrameError",
    "DataframeError",
    "DataframeDeletedError",
    "DatasetIOError",
    "KnowledgeBaseError",
    "ModelNotTrainedError",
    "RecordIndexError",
    "UnsupportedOperationError",
]
