"""Exception hierarchy shared by dataframes, storage and models."""


class MLFrameError(Exception):
    """Base exception for mlframe errors."""
    pass


class DataframeError(MLFrameError):
    """Base exception for dataframe errors."""
    pass


class UnsupportedOperationError(DataframeError, NotImplementedError):
    """Raised by every row-removal operation of a Dataframe.

    Row ids must stay a dense ``0..n-1`` range because matrix based
    algorithms use them as matrix row indices, so removal is never allowed.
    """
    pass


class RecordIndexError(DataframeError, IndexError):
    """Raised when a row id does not belong to the Dataframe."""
    pass


class DataframeDeletedError(DataframeError):
    """Raised when a Dataframe is used after delete()."""
    pass


class DatasetIOError(DataframeError, OSError):
    """Raised when ingesting a Dataframe from a file fails.

    The partially built Dataframe has already been deleted when this is raised.
    """
    pass


class KnowledgeBaseError(MLFrameError):
    """Base exception for knowledge base errors."""
    pass


class ModelNotTrainedError(KnowledgeBaseError):
    """Raised when a model is used before a knowledge base was persisted."""
    pass
